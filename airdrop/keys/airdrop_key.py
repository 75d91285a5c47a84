"""
Airdrop Key
One tagged identity type over every credential kind that can claim the airdrop.

Variants (KeyType):
- ADDRESS: a faucet or sponsor address with its awarded value. No private
  material; the commitment is fixed.
- RSA, P256, ED25519: public keys taken from an SSH or PGP credential.

A derived key starts in plain mode. Before lookup in the bulk tree the
recovered nonce is applied exactly once, either as a tweak (default: the
public key is blinded so the commitment does not reveal it) or in bare mode
(the nonce is committed next to the public key).

Hard Contracts:
- hash() = blake2b256(encode()), a pure function of current state
- bucket() depends only on the plain public encoding and never changes
- apply_nonce()/apply_tweak() succeed at most once per instance
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from airdrop.crypto.envelope import NONCE_SIZE, open_nonce
from airdrop.crypto.hashing import HASH_SIZE, blake2b256
from airdrop.keys.address import ADDRESS_HASH_SIZES, Address, parse_address
from airdrop.schemas.errors import FormatError, KeyFormatError, StateError
from airdrop.schemas.wire import BufferReader, BufferWriter


class KeyType(IntEnum):
    RSA = 0
    P256 = 1
    ED25519 = 2
    ADDRESS = 3


class KeyMode(IntEnum):
    PLAIN = 0
    BARE = 1
    TWEAKED = 2


ZERO_NONCE = bytes(NONCE_SIZE)

P256_POINT_SIZE = 33
ED25519_POINT_SIZE = 32
MAX_RSA_BITS = 8192


def _int_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8 or 1, "big")


def _encode_material(public_key) -> tuple[KeyType, bytes]:
    """Serialize a ``cryptography`` public key into its committed form."""
    if isinstance(public_key, rsa.RSAPublicKey):
        if public_key.key_size > MAX_RSA_BITS:
            raise KeyFormatError(f"RSA key too large: {public_key.key_size} bits")
        numbers = public_key.public_numbers()
        n = _int_bytes(numbers.n)
        e = _int_bytes(numbers.e)
        if len(e) > 0xff:
            raise KeyFormatError("RSA exponent too large")
        bw = BufferWriter()
        bw.write_u16(len(n)).write_bytes(n)
        bw.write_u8(len(e)).write_bytes(e)
        return KeyType.RSA, bw.render()

    if isinstance(public_key, ec.EllipticCurvePublicKey):
        if not isinstance(public_key.curve, ec.SECP256R1):
            raise KeyFormatError(f"Unsupported curve: {public_key.curve.name}")
        point = public_key.public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.CompressedPoint,
        )
        return KeyType.P256, point

    if isinstance(public_key, ed25519.Ed25519PublicKey):
        point = public_key.public_bytes(
            serialization.Encoding.Raw,
            serialization.PublicFormat.Raw,
        )
        return KeyType.ED25519, point

    raise KeyFormatError(f"Unsupported key type: {type(public_key).__name__}")


def _read_material(key_type: KeyType, br: BufferReader) -> tuple[Any, bytes]:
    """Read public material back into a ``cryptography`` key."""
    start = br.offset

    if key_type == KeyType.RSA:
        n = br.read_bytes(br.read_u16())
        e = br.read_bytes(br.read_u8())
        if not n or not e:
            raise KeyFormatError("Empty RSA parameter")
        public_key = rsa.RSAPublicNumbers(
            int.from_bytes(e, "big"),
            int.from_bytes(n, "big"),
        ).public_key()
    elif key_type == KeyType.P256:
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(
            ec.SECP256R1(), br.read_bytes(P256_POINT_SIZE)
        )
    elif key_type == KeyType.ED25519:
        public_key = ed25519.Ed25519PublicKey.from_public_bytes(
            br.read_bytes(ED25519_POINT_SIZE)
        )
    else:
        raise KeyFormatError(f"Unknown key type: {key_type}")

    return public_key, bytes(br.data[start:br.offset])


class AirdropKey:
    """
    A credential normalised for airdrop commitments.

    Construct through the ``from_*`` class methods or :meth:`decode`.
    """

    def __init__(self, key_type: KeyType) -> None:
        self.type = KeyType(key_type)

        # Address variant
        self.version = 0
        self.address = b""
        self.value = 0
        self.sponsor = False

        # Derived variants
        self.public_key = None
        self.material = b""
        self.mode = KeyMode.PLAIN
        self.nonce = ZERO_NONCE
        self.commitment = b""

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_address(cls, address: str | Address, value: int = 0, sponsor: bool = False) -> "AirdropKey":
        """
        Wrap a faucet or sponsor address.

        Raises:
            InvalidAddressError: If ``address`` is not a valid address
        """
        if isinstance(address, str):
            address = parse_address(address)

        if value < 0 or value > 0xffffffffffffffff:
            raise KeyFormatError(f"Address value out of range: {value}")

        key = cls(KeyType.ADDRESS)
        key.version = address.version
        key.address = address.hash
        key.value = int(value)
        key.sponsor = bool(sponsor)
        return key

    @classmethod
    def from_public_key(cls, public_key) -> "AirdropKey":
        """
        Wrap a ``cryptography`` RSA, P-256 or Ed25519 public key.

        Raises:
            KeyFormatError: If the key type is not supported
        """
        key_type, material = _encode_material(public_key)
        key = cls(key_type)
        key.public_key = public_key
        key.material = material
        return key

    @classmethod
    def from_ssh(cls, private_key) -> "AirdropKey":
        """Wrap the public half of a key loaded from an SSH private key file."""
        try:
            public_key = private_key.public_key()
        except AttributeError as e:
            raise KeyFormatError("Not an SSH private key") from e
        return cls.from_public_key(public_key)

    @classmethod
    def from_pgp(cls, pgp_key) -> "AirdropKey":
        """
        Wrap a PGPy key (public or secret).

        The key material is converted to the equivalent ``cryptography`` key
        so PGP and SSH credentials commit identically.
        """
        try:
            public_key = pgp_key._key.keymaterial.__pubkey__()
        except (AttributeError, NotImplementedError, ValueError) as e:
            raise KeyFormatError(f"Unsupported PGP key: {e}") from e
        return cls.from_public_key(public_key)

    # ------------------------------------------------------------------
    # Capability surface
    # ------------------------------------------------------------------

    def is_address(self) -> bool:
        return self.type == KeyType.ADDRESS

    def is_tweaked(self) -> bool:
        return self.mode == KeyMode.TWEAKED

    def _plain_encoding(self) -> bytes:
        if not self.material:
            raise StateError("Original public key is not known for this key")
        bw = BufferWriter()
        bw.write_u8(self.type)
        bw.write_u8(KeyMode.PLAIN)
        bw.write_bytes(self.material)
        bw.write_bytes(ZERO_NONCE)
        return bw.render()

    def encode(self) -> bytes:
        """Canonical serialization of the current key state."""
        bw = BufferWriter()
        bw.write_u8(self.type)

        if self.is_address():
            bw.write_u8(self.version)
            bw.write_u8(len(self.address))
            bw.write_bytes(self.address)
            bw.write_u64(self.value)
            bw.write_u8(1 if self.sponsor else 0)
            return bw.render()

        bw.write_u8(self.mode)

        if self.mode == KeyMode.TWEAKED:
            bw.write_bytes(self.commitment)
        else:
            bw.write_bytes(self.material)
            bw.write_bytes(self.nonce)

        return bw.render()

    @classmethod
    def decode(cls, data: bytes) -> "AirdropKey":
        """
        Parse an encoded key.

        Raises:
            KeyFormatError: On unknown type or mode, malformed material,
                truncation or trailing data
        """
        br = BufferReader(data)

        try:
            try:
                key_type = KeyType(br.read_u8())
            except ValueError as e:
                raise KeyFormatError(f"Unknown key type: {e}") from e

            key = cls(key_type)

            if key_type == KeyType.ADDRESS:
                key.version = br.read_u8()
                if key.version != 0:
                    raise KeyFormatError(f"Unsupported address version: {key.version}")
                key.address = br.read_bytes(br.read_u8())
                if len(key.address) not in ADDRESS_HASH_SIZES:
                    raise KeyFormatError("Invalid address hash size")
                key.value = br.read_u64()
                flag = br.read_u8()
                if flag > 1:
                    raise KeyFormatError("Invalid sponsor flag")
                key.sponsor = flag == 1
            else:
                try:
                    key.mode = KeyMode(br.read_u8())
                except ValueError as e:
                    raise KeyFormatError(f"Unknown key mode: {e}") from e

                if key.mode == KeyMode.TWEAKED:
                    key.commitment = br.read_bytes(HASH_SIZE)
                else:
                    try:
                        key.public_key, key.material = _read_material(key_type, br)
                    except ValueError as e:
                        raise KeyFormatError(f"Invalid public key: {e}") from e
                    key.nonce = br.read_bytes(NONCE_SIZE)
                    if key.mode == KeyMode.PLAIN and key.nonce != ZERO_NONCE:
                        raise KeyFormatError("Plain key carries a nonce")

            br.verify_end()
        except FormatError as e:
            raise KeyFormatError(f"Malformed key encoding: {e.message}") from e

        return key

    def hash(self) -> bytes:
        """256-bit identity commitment of the current state."""
        return blake2b256(self.encode())

    def bucket(self) -> int:
        """Nonce bucket in [0, 255]; address keys bucket by their own hash."""
        if self.is_address():
            return self.hash()[0]
        return blake2b256(self._plain_encoding())[0]

    def _check_transform(self, nonce: bytes) -> None:
        if self.is_address():
            raise StateError("Address keys do not take a nonce")

        if self.mode != KeyMode.PLAIN:
            raise StateError("Nonce already applied to key")

        if not isinstance(nonce, (bytes, bytearray)) or len(nonce) != NONCE_SIZE:
            raise StateError(f"Nonce must be {NONCE_SIZE} bytes")

    def apply_nonce(self, nonce: bytes) -> "AirdropKey":
        """Bare mode: commit the nonce next to the unmodified public key."""
        self._check_transform(nonce)
        self.nonce = bytes(nonce)
        self.mode = KeyMode.BARE
        return self

    def apply_tweak(self, nonce: bytes) -> "AirdropKey":
        """Default mode: blind the public key with the nonce."""
        self._check_transform(nonce)
        self.commitment = blake2b256(self.material, key=bytes(nonce))
        self.mode = KeyMode.TWEAKED
        return self

    def decrypt(self, ciphertext: bytes, private_key) -> bytes:
        """
        Open one bucket ciphertext with the holder's private key.

        Raises:
            DecryptError: If the ciphertext was not sealed to this key
        """
        if self.is_address():
            raise StateError("Address keys have no private material")
        return open_nonce(private_key, ciphertext)

    def to_dict(self) -> dict[str, Any]:
        if self.is_address():
            return {
                "type": self.type.name.lower(),
                "version": self.version,
                "address": self.address.hex(),
                "value": self.value,
                "sponsor": self.sponsor,
            }
        return {
            "type": self.type.name.lower(),
            "mode": self.mode.name.lower(),
            "hash": self.hash().hex(),
        }

    def __repr__(self) -> str:
        return f"AirdropKey(type={self.type.name}, hash={self.hash().hex()[:16]})"


__all__ = [
    "KeyType",
    "KeyMode",
    "AirdropKey",
]
