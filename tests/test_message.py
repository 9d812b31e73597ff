"""
Canonical Encoding and Signature Payload Tests

The payload bytes are what signers sign, so their exact form is pinned
here: any change breaks every signature already issued.
"""

import json
import unittest

from tokenauth import (
    Domain,
    EncodingError,
    Identifier,
    SignaturePayload,
    UnsupportedMessageVersion,
    canonical_value,
    canonicalize,
    from_canonical_value,
    sha256_hash,
)
from tokenauth.hashing import sha256_digest, verify_hash

KEY = b"\x01" * 32


class TestCanonicalJson(unittest.TestCase):

    def test_keys_sorted_and_compact(self):
        self.assertEqual(canonicalize({"b": 1, "a": [True, None]}), b'{"a":[true,null],"b":1}')

    def test_utf8_not_escaped(self):
        self.assertEqual(canonicalize({"n": "café"}), '{"n":"café"}'.encode("utf-8"))

    def test_float_rejected(self):
        with self.assertRaises(EncodingError):
            canonicalize({"amount": 1.5})

    def test_non_string_keys_rejected(self):
        with self.assertRaises(EncodingError):
            canonicalize({1: "x"})


class TestTypedValues(unittest.TestCase):

    def test_tags(self):
        self.assertEqual(canonical_value(5), ["int", "5"])
        self.assertEqual(canonical_value(True), ["bool", True])
        self.assertEqual(canonical_value(b"\xab"), ["bytes", "ab"])
        self.assertEqual(canonical_value("5"), ["str", "5"])
        self.assertEqual(canonical_value(Identifier.ed25519(KEY)), ["id", ["Ed25519", KEY.hex()]])

    def test_int_and_string_do_not_collide(self):
        self.assertNotEqual(canonical_value(1), canonical_value("1"))
        self.assertNotEqual(canonical_value(1), canonical_value(True))

    def test_large_int_is_exact(self):
        big = 2**200 + 1
        self.assertEqual(from_canonical_value(canonical_value(big)), big)

    def test_inverse(self):
        value = (Identifier.account(KEY), 42, b"\x00\x01", "sym", False, (1, 2))
        self.assertEqual(from_canonical_value(canonical_value(value)), value)

    def test_unsupported_types(self):
        for bad in (1.0, None, {"a": 1}, object()):
            with self.assertRaises(EncodingError):
                canonical_value(bad)

    def test_non_canonical_int_rejected(self):
        for text in ("01", "-0", "+1", " 1", "1_000"):
            with self.assertRaises(EncodingError):
                from_canonical_value(["int", text])

    def test_unknown_tag_rejected(self):
        with self.assertRaises(EncodingError):
            from_canonical_value(["float", "1.0"])
        with self.assertRaises(EncodingError):
            from_canonical_value("int")


class TestDomain(unittest.TestCase):

    def test_numeric_tags_are_fixed(self):
        self.assertEqual(
            [(d.name, d.value) for d in Domain],
            [
                ("APPROVE", 0),
                ("TRANSFER", 1),
                ("TRANSFER_FROM", 2),
                ("BURN", 3),
                ("FREEZE", 4),
                ("MINT", 5),
                ("SET_ADMINISTRATOR", 6),
                ("UNFREEZE", 7),
            ],
        )

    def test_from_name(self):
        self.assertIs(Domain.from_name("transfer_from"), Domain.TRANSFER_FROM)
        self.assertIs(Domain.from_name("SetAdministrator"), Domain.SET_ADMINISTRATOR)
        with self.assertRaises(ValueError):
            Domain.from_name("withdraw")

    def test_parameter_names(self):
        self.assertEqual(Domain.TRANSFER_FROM.parameter_names, ("from", "to", "amount"))
        self.assertEqual(Domain.FREEZE.parameter_names, ("id",))


class TestSignaturePayload(unittest.TestCase):

    def test_pinned_encoding(self):
        payload = SignaturePayload(nonce=0, domain=Domain.FREEZE, parameters=(Identifier.ed25519(KEY),))
        expected = (
            '{"body":{"domain":4,"nonce":"0","parameters":[["id",["Ed25519","'
            + KEY.hex()
            + '"]]]},"version":0}'
        ).encode("utf-8")
        self.assertEqual(payload.encode(), expected)
        self.assertEqual(payload.digest(), sha256_digest(expected))
        self.assertEqual(len(payload.digest()), 32)

    def test_every_field_changes_digest(self):
        to = Identifier.ed25519(KEY)
        base = SignaturePayload(nonce=3, domain=Domain.TRANSFER, parameters=(to, 10))
        variants = [
            SignaturePayload(nonce=4, domain=Domain.TRANSFER, parameters=(to, 10)),
            SignaturePayload(nonce=3, domain=Domain.MINT, parameters=(to, 10)),
            SignaturePayload(nonce=3, domain=Domain.TRANSFER, parameters=(to, 11)),
            SignaturePayload(nonce=3, domain=Domain.TRANSFER, parameters=(Identifier.account(KEY), 10)),
        ]
        for other in variants:
            self.assertNotEqual(base.digest(), other.digest())

    def test_decode_round_trip(self):
        payload = SignaturePayload(
            nonce=7,
            domain=Domain.TRANSFER_FROM,
            parameters=(Identifier.ed25519(KEY), Identifier.account(KEY), 2**70),
        )
        self.assertEqual(SignaturePayload.decode(payload.encode()), payload)

    def test_decode_rejects_other_versions(self):
        data = json.loads(SignaturePayload(nonce=0, domain=Domain.FREEZE, parameters=(1,)).encode())
        data["version"] = 1
        with self.assertRaises(UnsupportedMessageVersion):
            SignaturePayload.decode(canonicalize(data))

    def test_decode_rejects_non_canonical_bytes(self):
        encoded = SignaturePayload(nonce=0, domain=Domain.FREEZE, parameters=(1,)).encode()
        spaced = json.dumps(json.loads(encoded), indent=1).encode("utf-8")
        with self.assertRaises(EncodingError):
            SignaturePayload.decode(spaced)

    def test_decode_rejects_garbage(self):
        with self.assertRaises(EncodingError):
            SignaturePayload.decode(b"\xff\xfe")
        with self.assertRaises(EncodingError):
            SignaturePayload.decode(b'{"version":0,"body":[]}')

    def test_only_version_zero(self):
        with self.assertRaises(UnsupportedMessageVersion):
            SignaturePayload(nonce=0, domain=Domain.FREEZE, parameters=(1,), version=1)

    def test_arity_checked(self):
        with self.assertRaises(EncodingError):
            SignaturePayload(nonce=0, domain=Domain.TRANSFER, parameters=(Identifier.ed25519(KEY),))

    def test_nonce_must_be_natural(self):
        for nonce in (-1, True, "0"):
            with self.assertRaises(EncodingError):
                SignaturePayload(nonce=nonce, domain=Domain.FREEZE, parameters=(1,))


class TestHashing(unittest.TestCase):

    def test_display_form(self):
        self.assertEqual(
            sha256_hash(b""),
            "sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        )

    def test_verify_hash(self):
        self.assertTrue(verify_hash(sha256_hash("abc"), "abc"))
        self.assertFalse(verify_hash(sha256_hash("abc"), "abd"))
        self.assertFalse(verify_hash("md5:00", "abc"))


if __name__ == "__main__":
    unittest.main()
