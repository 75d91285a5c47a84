"""
Nonce Envelope Unit Tests
Tests for airdrop/crypto/envelope.py
"""
import pytest
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519

from airdrop.crypto.envelope import (
    NONCE_SIZE,
    DecryptError,
    ed25519_to_x25519_private,
    ed25519_to_x25519_public,
    open_nonce,
    random_nonce,
    seal_nonce,
)
from airdrop.schemas.errors import KeyFormatError

from fixtures.common import make_credential, make_hash


@pytest.mark.parametrize("kind", ["ed25519", "p256", "rsa"])
class TestSealOpen:
    def test_open_recovers_nonce(self, kind):
        credential = make_credential(kind)
        nonce = make_hash("sealed")

        ciphertext = seal_nonce(credential.key.public_key, nonce)

        assert open_nonce(credential.private_key, ciphertext) == nonce

    def test_wrong_key_fails(self, kind):
        credential = make_credential(kind)
        other = make_credential(kind)
        ciphertext = seal_nonce(credential.key.public_key, make_hash("sealed"))

        with pytest.raises(DecryptError):
            open_nonce(other.private_key, ciphertext)

    def test_corrupted_ciphertext_fails(self, kind):
        credential = make_credential(kind)
        ciphertext = bytearray(seal_nonce(credential.key.public_key, make_hash("sealed")))
        ciphertext[-1] ^= 1

        with pytest.raises(DecryptError):
            open_nonce(credential.private_key, bytes(ciphertext))

    def test_airdrop_key_decrypt_delegates(self, kind):
        credential = make_credential(kind)
        nonce = make_hash("delegated")
        ciphertext = seal_nonce(credential.key.public_key, nonce)

        assert credential.key.decrypt(ciphertext, credential.private_key) == nonce


class TestEnvelopeEdges:
    def test_truncated_ed25519_ciphertext(self):
        credential = make_credential("ed25519")
        with pytest.raises(DecryptError):
            open_nonce(credential.private_key, bytes(10))

    def test_wrong_nonce_size_on_seal(self):
        credential = make_credential("ed25519")
        with pytest.raises(ValueError):
            seal_nonce(credential.key.public_key, b"short")

    def test_unsupported_public_key(self):
        public_key = x25519.X25519PrivateKey.generate().public_key()
        with pytest.raises(KeyFormatError):
            seal_nonce(public_key, make_hash("n"))

    def test_random_nonce_size(self):
        assert len(random_nonce()) == NONCE_SIZE

    def test_x25519_conversion_agrees(self):
        private_key = ed25519.Ed25519PrivateKey.generate()
        converted = ed25519_to_x25519_private(private_key).public_key()
        expected = ed25519_to_x25519_public(private_key.public_key())

        assert converted.public_bytes_raw() == expected.public_bytes_raw()
