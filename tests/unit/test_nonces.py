"""
Nonce Resolver Unit Tests
Tests for airdrop/tree/nonces.py
"""
import pytest

from airdrop.crypto.envelope import DecryptError
from airdrop.schemas.errors import FormatError, NonceNotFoundError
from airdrop.tree.nonces import (
    bucket_filename,
    encode_bucket,
    find_nonce,
    iter_ciphertexts,
)

from fixtures.common import make_bucket, make_credential, make_hash


def _opener(credential):
    def decrypt(ciphertext: bytes) -> bytes:
        return credential.key.decrypt(ciphertext, credential.private_key)
    return decrypt


class TestBucketFile:
    def test_iterates_in_order(self):
        data = encode_bucket([b"a", b"bb", b"ccc"])
        assert list(iter_ciphertexts(data)) == [b"a", b"bb", b"ccc"]

    def test_length_prefix_is_u16_le(self):
        assert encode_bucket([b"xyz"]) == b"\x03\x00xyz"

    def test_empty_file(self):
        assert list(iter_ciphertexts(b"")) == []

    def test_truncated_entry(self):
        data = encode_bucket([b"abcdef"])[:-2]
        with pytest.raises(FormatError):
            list(iter_ciphertexts(data))

    def test_truncated_length(self):
        with pytest.raises(FormatError):
            list(iter_ciphertexts(b"\x05"))

    @pytest.mark.parametrize("bucket,name", [(0, "000.bin"), (42, "042.bin"), (255, "255.bin")])
    def test_bucket_filename(self, bucket, name):
        assert bucket_filename(bucket) == name

    @pytest.mark.parametrize("bucket", [-1, 256])
    def test_bucket_filename_out_of_range(self, bucket):
        with pytest.raises(ValueError):
            bucket_filename(bucket)


class TestFindNonce:
    def test_third_of_five_opens(self):
        credential = make_credential("ed25519")
        nonce = make_hash("mine")
        data = make_bucket(credential, nonce, total=5, position=2)

        assert find_nonce(data, _opener(credential), bucket=42) == nonce

    def test_stops_at_first_success(self):
        calls = []

        def decrypt(ciphertext):
            calls.append(ciphertext)
            if ciphertext == b"two":
                return make_hash("two")
            raise DecryptError("not mine")

        data = encode_bucket([b"one", b"two", b"three"])

        assert find_nonce(data, decrypt, bucket=0) == make_hash("two")
        assert calls == [b"one", b"two"]

    def test_wrong_key_exhausts_bucket(self):
        owner = make_credential("ed25519")
        stranger = make_credential("ed25519")
        data = make_bucket(owner, make_hash("mine"), total=5, position=2)

        with pytest.raises(NonceNotFoundError) as exc_info:
            find_nonce(data, _opener(stranger), bucket=42)

        assert exc_info.value.tried == 5
        assert exc_info.value.bucket == 42
        assert exc_info.value.details == {"bucket": 42, "tried": 5}

    def test_empty_bucket(self):
        credential = make_credential("ed25519")
        with pytest.raises(NonceNotFoundError) as exc_info:
            find_nonce(b"", _opener(credential), bucket=1)
        assert exc_info.value.tried == 0

    def test_other_errors_propagate(self):
        def decrypt(ciphertext):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            find_nonce(encode_bucket([b"x"]), decrypt, bucket=0)

    @pytest.mark.parametrize("kind", ["p256", "rsa"])
    def test_other_key_types(self, kind):
        credential = make_credential(kind)
        nonce = make_hash(kind)
        data = make_bucket(credential, nonce, total=3, position=0)

        assert find_nonce(data, _opener(credential), bucket=3) == nonce
