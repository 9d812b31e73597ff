import logging

import pytest
from fastapi.testclient import TestClient

from tokenauth import KeyPair, Token
from tokenauth.service import create_app


@pytest.fixture
def token():
    return Token()


@pytest.fixture
def admin():
    return KeyPair.generate()


@pytest.fixture
def api(token):
    return TestClient(create_app(token))


@pytest.fixture
def initialized(api, admin):
    r = api.post("/initialize", json={
        "admin": admin.identifier().to_dict(),
        "decimals": 7,
        "name": "name",
        "symbol": "symbol",
    })
    assert r.status_code == 200
    return api


# Commands that call configure_logging rewire the root logger
@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
