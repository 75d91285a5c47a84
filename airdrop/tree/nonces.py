"""
Nonce Resolver
Find the one nonce in a bucket file that opens with the holder's private key.

Bucket file format: repeated {u16 length, length bytes ciphertext} until the
end of the file. Entries carry no key tag, so every ciphertext is tried in
stored order and the first one that decrypts wins. A bucket holds roughly
total_keys / 256 entries, which keeps the scan short.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterator, Sequence

from airdrop.crypto.envelope import DecryptError
from airdrop.schemas.errors import NonceNotFoundError
from airdrop.schemas.wire import BufferReader, BufferWriter


logger = logging.getLogger(__name__)

BUCKET_COUNT = 256

Decryptor = Callable[[bytes], bytes]


def bucket_filename(bucket: int) -> str:
    """Zero-padded file name of a bucket, e.g. ``042.bin``."""
    if not 0 <= bucket < BUCKET_COUNT:
        raise ValueError(f"Bucket out of range: {bucket}")
    return f"{bucket:03d}.bin"


def iter_ciphertexts(data: bytes) -> Iterator[bytes]:
    """
    Yield every ciphertext in a bucket file.

    Raises:
        FormatError: If the last entry is truncated
    """
    br = BufferReader(data)

    while br.left():
        yield br.read_bytes(br.read_u16())


def find_nonce(data: bytes, decrypt: Decryptor, bucket: int) -> bytes:
    """
    Trial-decrypt the ciphertexts of one bucket.

    Args:
        data: Bucket file contents
        decrypt: Opens one ciphertext, raising DecryptError when it belongs
            to another key
        bucket: Bucket number, for error reporting

    Returns:
        The first successfully decrypted nonce

    Raises:
        NonceNotFoundError: If no entry decrypts
    """
    tried = 0

    for ciphertext in iter_ciphertexts(data):
        tried += 1
        try:
            nonce = decrypt(ciphertext)
        except DecryptError:
            continue

        logger.debug(f"Nonce found in bucket {bucket} at entry {tried - 1}")
        return nonce

    raise NonceNotFoundError(bucket, tried)


def encode_bucket(ciphertexts: Sequence[bytes]) -> bytes:
    """Serialize ciphertexts into the bucket file format."""
    bw = BufferWriter()

    for ciphertext in ciphertexts:
        if len(ciphertext) > 0xffff:
            raise ValueError(f"Ciphertext too large: {len(ciphertext)} bytes")
        bw.write_u16(len(ciphertext))
        bw.write_bytes(ciphertext)

    return bw.render()


__all__ = [
    "BUCKET_COUNT",
    "Decryptor",
    "bucket_filename",
    "iter_ciphertexts",
    "find_nonce",
    "encode_bucket",
]
