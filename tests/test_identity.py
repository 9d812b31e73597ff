"""
Identity and Authorization Model Tests

Covers identifier equality and hashing, the keyed/unkeyed proof variants
and their dict wire forms.
"""

import unittest

from tokenauth import (
    AccountAuthorization,
    ContractAuthorization,
    Ed25519Authorization,
    Identifier,
    IdentifierKind,
    InvocationContext,
    KeyedAccountAuthorization,
    KeyedEd25519Authorization,
    KeyedEd25519Signature,
    NotAuthorized,
    authorization_from_dict,
    keyed_authorization_from_dict,
)
from tokenauth.identity import get_identifier

KEY_A = bytes(range(32))
KEY_B = bytes(range(1, 33))
SIG = b"\x07" * 64


class TestIdentifier(unittest.TestCase):

    def test_structural_equality(self):
        self.assertEqual(Identifier.ed25519(KEY_A), Identifier.ed25519(bytes(KEY_A)))
        self.assertEqual(hash(Identifier.ed25519(KEY_A)), hash(Identifier.ed25519(KEY_A)))

    def test_kind_distinguishes_same_bytes(self):
        ids = {
            Identifier.contract(KEY_A),
            Identifier.ed25519(KEY_A),
            Identifier.account(KEY_A),
        }
        self.assertEqual(len(ids), 3)

    def test_wrong_length_rejected(self):
        with self.assertRaises(ValueError):
            Identifier.ed25519(b"\x01" * 31)
        with self.assertRaises(ValueError):
            Identifier.account(b"\x01" * 33)

    def test_unknown_kind_rejected(self):
        with self.assertRaises(ValueError):
            Identifier("Wallet", KEY_A)

    def test_dict_form(self):
        ident = Identifier.account(KEY_B)
        data = ident.to_dict()
        self.assertEqual(data, {"type": "Account", "value": KEY_B.hex()})
        self.assertEqual(Identifier.from_dict(data), ident)

    def test_from_dict_bad_hex(self):
        with self.assertRaises(ValueError):
            Identifier.from_dict({"type": "Ed25519", "value": "zz"})

    def test_short_label(self):
        self.assertEqual(Identifier.ed25519(KEY_A).short(), "Ed25519:00010203")
        self.assertIs(Identifier.ed25519(KEY_A).kind, IdentifierKind.ED25519)


class TestKeyedIdentity(unittest.TestCase):

    def test_ed25519_identifier_is_embedded_key(self):
        auth = KeyedEd25519Authorization(public_key=KEY_A, signature=SIG)
        self.assertEqual(auth.get_identifier(InvocationContext()), Identifier.ed25519(KEY_A))

    def test_account_identifier_is_embedded_key(self):
        auth = KeyedAccountAuthorization(public_key=KEY_B, signatures=())
        self.assertEqual(get_identifier(auth, InvocationContext()), Identifier.account(KEY_B))

    def test_contract_identifier_comes_from_context(self):
        ctx = InvocationContext(invoking_contract=KEY_A)
        self.assertEqual(ContractAuthorization().get_identifier(ctx), Identifier.contract(KEY_A))

    def test_contract_identifier_requires_invoker(self):
        with self.assertRaises(NotAuthorized):
            ContractAuthorization().get_identifier(InvocationContext())

    def test_unkeyed_proof_has_no_identifier(self):
        with self.assertRaises(TypeError):
            get_identifier(Ed25519Authorization(SIG), InvocationContext())

    def test_signature_length_enforced(self):
        with self.assertRaises(ValueError):
            Ed25519Authorization(b"\x00" * 63)
        with self.assertRaises(ValueError):
            KeyedEd25519Signature(public_key=KEY_A, signature=b"")

    def test_account_signatures_must_be_keyed(self):
        with self.assertRaises(ValueError):
            AccountAuthorization(signatures=(SIG,))


class TestWireForms(unittest.TestCase):

    def test_keyed_round_trip(self):
        proofs = [
            ContractAuthorization(),
            KeyedEd25519Authorization(public_key=KEY_A, signature=SIG),
            KeyedAccountAuthorization(
                public_key=KEY_B,
                signatures=(KeyedEd25519Signature(KEY_A, SIG),),
            ),
        ]
        for proof in proofs:
            self.assertEqual(keyed_authorization_from_dict(proof.to_dict()), proof)

    def test_unkeyed_round_trip(self):
        proofs = [
            ContractAuthorization(),
            Ed25519Authorization(SIG),
            AccountAuthorization((KeyedEd25519Signature(KEY_A, SIG),)),
        ]
        for proof in proofs:
            self.assertEqual(authorization_from_dict(proof.to_dict()), proof)

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            authorization_from_dict({"type": "Password"})
        with self.assertRaises(ValueError):
            keyed_authorization_from_dict({})


if __name__ == "__main__":
    unittest.main()
