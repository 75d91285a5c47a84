"""
AirdropKey Unit Tests
Tests for airdrop/keys/airdrop_key.py

- Address keys: encoding, hash, bucket, no transforms
- Derived keys: bucket invariance across transforms, one transform only,
  nonce length checks, strict decoding
"""
import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from airdrop.crypto.hashing import blake2b256
from airdrop.keys.airdrop_key import AirdropKey, KeyMode, KeyType
from airdrop.schemas.errors import InvalidAddressError, KeyFormatError, StateError

from fixtures.common import TEST_ADDRESS, make_credential, make_hash


NONCE = make_hash("nonce")


class TestAddressKey:
    def test_from_address(self):
        key = AirdropKey.from_address(TEST_ADDRESS, 1000, sponsor=True)

        assert key.is_address()
        assert key.type == KeyType.ADDRESS
        assert key.value == 1000
        assert key.sponsor is True
        assert len(key.address) == 20

    def test_hash_is_blake2b_of_encoding(self):
        key = AirdropKey.from_address(TEST_ADDRESS, 5)
        assert key.hash() == blake2b256(key.encode())
        assert len(key.hash()) == 32

    def test_bucket_is_first_hash_byte(self):
        key = AirdropKey.from_address(TEST_ADDRESS, 5)
        assert key.bucket() == key.hash()[0]

    def test_value_and_sponsor_change_hash(self):
        base = AirdropKey.from_address(TEST_ADDRESS, 5).hash()
        assert AirdropKey.from_address(TEST_ADDRESS, 6).hash() != base
        assert AirdropKey.from_address(TEST_ADDRESS, 5, sponsor=True).hash() != base

    def test_round_trip(self):
        key = AirdropKey.from_address(TEST_ADDRESS, 123456, sponsor=True)
        decoded = AirdropKey.decode(key.encode())

        assert decoded.is_address()
        assert decoded.value == 123456
        assert decoded.sponsor is True
        assert decoded.hash() == key.hash()

    def test_invalid_address(self):
        with pytest.raises(InvalidAddressError):
            AirdropKey.from_address("xs1q...", 1)

    def test_nonce_rejected(self):
        key = AirdropKey.from_address(TEST_ADDRESS, 1)
        with pytest.raises(StateError):
            key.apply_nonce(NONCE)
        with pytest.raises(StateError):
            key.apply_tweak(NONCE)


@pytest.mark.parametrize("kind", ["ed25519", "p256", "rsa"])
class TestDerivedKey:
    def test_plain_state(self, kind):
        key = make_credential(kind).key

        assert not key.is_address()
        assert key.mode == KeyMode.PLAIN
        assert 0 <= key.bucket() <= 255

    def test_bucket_invariant_under_tweak(self, kind):
        key = make_credential(kind).key
        bucket = key.bucket()
        plain_hash = key.hash()

        key.apply_tweak(NONCE)

        assert key.bucket() == bucket
        assert key.hash() != plain_hash
        assert key.is_tweaked()

    def test_bucket_invariant_under_bare_nonce(self, kind):
        key = make_credential(kind).key
        bucket = key.bucket()

        key.apply_nonce(NONCE)

        assert key.bucket() == bucket
        assert key.mode == KeyMode.BARE

    def test_tweak_and_bare_commit_differently(self, kind):
        credential = make_credential(kind)
        tweaked = AirdropKey.from_public_key(credential.key.public_key).apply_tweak(NONCE)
        bare = AirdropKey.from_public_key(credential.key.public_key).apply_nonce(NONCE)
        assert tweaked.hash() != bare.hash()

    def test_second_transform_fails(self, kind):
        key = make_credential(kind).key
        key.apply_tweak(NONCE)

        with pytest.raises(StateError):
            key.apply_tweak(NONCE)
        with pytest.raises(StateError):
            key.apply_nonce(NONCE)

    def test_failed_second_transform_keeps_state(self, kind):
        key = make_credential(kind).key
        key.apply_nonce(NONCE)
        committed = key.hash()

        with pytest.raises(StateError):
            key.apply_tweak(make_hash("other"))

        assert key.hash() == committed

    @pytest.mark.parametrize("size", [0, 31, 33])
    def test_wrong_nonce_length(self, kind, size):
        key = make_credential(kind).key
        with pytest.raises(StateError):
            key.apply_nonce(bytes(size))
        assert key.mode == KeyMode.PLAIN

    def test_round_trip_plain_and_bare(self, kind):
        key = make_credential(kind).key
        assert AirdropKey.decode(key.encode()).hash() == key.hash()

        key.apply_nonce(NONCE)
        decoded = AirdropKey.decode(key.encode())
        assert decoded.mode == KeyMode.BARE
        assert decoded.hash() == key.hash()
        assert decoded.bucket() == key.bucket()

    def test_round_trip_tweaked(self, kind):
        key = make_credential(kind).key.apply_tweak(NONCE)
        decoded = AirdropKey.decode(key.encode())

        assert decoded.is_tweaked()
        assert decoded.hash() == key.hash()


class TestDecodeStrictness:
    def test_trailing_data(self):
        data = AirdropKey.from_address(TEST_ADDRESS, 1).encode()
        with pytest.raises(KeyFormatError):
            AirdropKey.decode(data + b"\x00")

    def test_truncated(self):
        data = make_credential("ed25519").key.encode()
        with pytest.raises(KeyFormatError):
            AirdropKey.decode(data[:-1])

    def test_nonzero_address_version(self):
        data = bytearray(AirdropKey.from_address(TEST_ADDRESS, 1).encode())
        data[1] = 1
        with pytest.raises(KeyFormatError, match="address version"):
            AirdropKey.decode(bytes(data))

    def test_unknown_type(self):
        with pytest.raises(KeyFormatError):
            AirdropKey.decode(b"\x09\x00")

    def test_unknown_mode(self):
        with pytest.raises(KeyFormatError):
            AirdropKey.decode(b"\x02\x07" + bytes(64))

    def test_empty(self):
        with pytest.raises(KeyFormatError):
            AirdropKey.decode(b"")

    def test_plain_key_with_nonce(self):
        data = bytearray(make_credential("ed25519").key.encode())
        data[-1] ^= 1
        with pytest.raises(KeyFormatError):
            AirdropKey.decode(bytes(data))


class TestUnsupportedMaterial:
    def test_other_curve(self):
        public_key = ec.generate_private_key(ec.SECP384R1()).public_key()
        with pytest.raises(KeyFormatError):
            AirdropKey.from_public_key(public_key)

    def test_not_a_key(self):
        with pytest.raises(KeyFormatError):
            AirdropKey.from_ssh(object())
