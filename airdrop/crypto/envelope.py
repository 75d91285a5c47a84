"""
Nonce Envelope
Seal a 32-byte nonce to one public key and open it with the private key.

Each registered key has its nonce published encrypted in its bucket file.
Envelope formats by key type:
- RSA:     RSA-OAEP(SHA-256) ciphertext
- P-256:   33-byte compressed ephemeral point || ChaCha20-Poly1305 ciphertext
- Ed25519: 32-byte ephemeral X25519 key || ChaCha20-Poly1305 ciphertext

For the elliptic curve envelopes the symmetric key is
blake2b256(shared_secret || ephemeral_public || recipient_public). The AEAD
nonce is all zeroes because every key is used exactly once.

Ed25519 keys are converted to their X25519 (Montgomery) form so that the
same SSH or PGP signing key can receive an encrypted nonce.
"""
from __future__ import annotations

import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa, x25519
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from airdrop.crypto.hashing import hash_concat
from airdrop.schemas.errors import KeyFormatError

NONCE_SIZE = 32

_AEAD_NONCE = bytes(12)
_P256_POINT_SIZE = 33
_X25519_KEY_SIZE = 32

# Field prime of curve25519.
_P = 2**255 - 19

_OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


class DecryptError(Exception):
    """A ciphertext could not be opened with the given private key."""
    pass


def _compressed(point: ec.EllipticCurvePublicKey) -> bytes:
    return point.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.CompressedPoint,
    )


def _raw(key) -> bytes:
    return key.public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )


def ed25519_to_x25519_public(public_key: ed25519.Ed25519PublicKey) -> x25519.X25519PublicKey:
    """Map an Ed25519 point to its Montgomery u-coordinate: u = (1 + y) / (1 - y)."""
    y = int.from_bytes(_raw(public_key), "little") & ((1 << 255) - 1)
    denominator = (1 - y) % _P
    if denominator == 0:
        raise KeyFormatError("Ed25519 point has no X25519 equivalent")
    u = (1 + y) * pow(denominator, _P - 2, _P) % _P
    return x25519.X25519PublicKey.from_public_bytes(u.to_bytes(32, "little"))


def ed25519_to_x25519_private(private_key: ed25519.Ed25519PrivateKey) -> x25519.X25519PrivateKey:
    """Derive the X25519 scalar from an Ed25519 seed (clamped by X25519 itself)."""
    seed = private_key.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )
    return x25519.X25519PrivateKey.from_private_bytes(hashlib.sha512(seed).digest()[:32])


def _aead_key(shared: bytes, ephemeral: bytes, recipient: bytes) -> ChaCha20Poly1305:
    return ChaCha20Poly1305(hash_concat(shared, ephemeral, recipient))


def seal_nonce(public_key, nonce: bytes) -> bytes:
    """
    Encrypt ``nonce`` to ``public_key``.

    Args:
        public_key: A ``cryptography`` RSA, P-256 or Ed25519 public key
        nonce: 32-byte nonce

    Returns:
        Envelope bytes suitable for a bucket file entry

    Raises:
        KeyFormatError: If the key type is not supported
    """
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")

    if isinstance(public_key, rsa.RSAPublicKey):
        return public_key.encrypt(nonce, _OAEP)

    if isinstance(public_key, ec.EllipticCurvePublicKey):
        if not isinstance(public_key.curve, ec.SECP256R1):
            raise KeyFormatError(f"Unsupported curve: {public_key.curve.name}")
        ephemeral = ec.generate_private_key(ec.SECP256R1())
        shared = ephemeral.exchange(ec.ECDH(), public_key)
        ephemeral_pub = _compressed(ephemeral.public_key())
        aead = _aead_key(shared, ephemeral_pub, _compressed(public_key))
        return ephemeral_pub + aead.encrypt(_AEAD_NONCE, nonce, None)

    if isinstance(public_key, ed25519.Ed25519PublicKey):
        recipient = ed25519_to_x25519_public(public_key)
        ephemeral = x25519.X25519PrivateKey.generate()
        shared = ephemeral.exchange(recipient)
        ephemeral_pub = _raw(ephemeral.public_key())
        aead = _aead_key(shared, ephemeral_pub, _raw(recipient))
        return ephemeral_pub + aead.encrypt(_AEAD_NONCE, nonce, None)

    raise KeyFormatError(f"Unsupported public key type: {type(public_key).__name__}")


def open_nonce(private_key, ciphertext: bytes) -> bytes:
    """
    Decrypt an envelope produced by :func:`seal_nonce`.

    Raises:
        DecryptError: If the envelope was not sealed to this key or is corrupt
        KeyFormatError: If the key type is not supported
    """
    try:
        if isinstance(private_key, rsa.RSAPrivateKey):
            nonce = private_key.decrypt(ciphertext, _OAEP)

        elif isinstance(private_key, ec.EllipticCurvePrivateKey):
            if len(ciphertext) <= _P256_POINT_SIZE:
                raise DecryptError("Ciphertext too short")
            ephemeral_pub = ciphertext[:_P256_POINT_SIZE]
            ephemeral = ec.EllipticCurvePublicKey.from_encoded_point(
                ec.SECP256R1(), ephemeral_pub
            )
            shared = private_key.exchange(ec.ECDH(), ephemeral)
            recipient = _compressed(private_key.public_key())
            aead = _aead_key(shared, ephemeral_pub, recipient)
            nonce = aead.decrypt(_AEAD_NONCE, ciphertext[_P256_POINT_SIZE:], None)

        elif isinstance(private_key, ed25519.Ed25519PrivateKey):
            if len(ciphertext) <= _X25519_KEY_SIZE:
                raise DecryptError("Ciphertext too short")
            secret = ed25519_to_x25519_private(private_key)
            ephemeral_pub = ciphertext[:_X25519_KEY_SIZE]
            ephemeral = x25519.X25519PublicKey.from_public_bytes(ephemeral_pub)
            shared = secret.exchange(ephemeral)
            recipient = _raw(secret.public_key())
            aead = _aead_key(shared, ephemeral_pub, recipient)
            nonce = aead.decrypt(_AEAD_NONCE, ciphertext[_X25519_KEY_SIZE:], None)

        else:
            raise KeyFormatError(
                f"Unsupported private key type: {type(private_key).__name__}"
            )
    except (InvalidTag, ValueError) as e:
        raise DecryptError(str(e) or type(e).__name__) from e

    if len(nonce) != NONCE_SIZE:
        raise DecryptError(f"Decrypted payload has unexpected size {len(nonce)}")

    return nonce


def random_nonce() -> bytes:
    return os.urandom(NONCE_SIZE)


__all__ = [
    "NONCE_SIZE",
    "DecryptError",
    "seal_nonce",
    "open_nonce",
    "random_nonce",
    "ed25519_to_x25519_public",
    "ed25519_to_x25519_private",
]
