"""
Credential Loaders

Turn a key file into an AirdropKey plus the private key needed to open the
holder's nonce. SSH keys are parsed by ``cryptography``; PGP keyrings
(armored ``.asc`` or binary ``.pgp``/``.gpg``) by ``PGPy``.

Passphrases are requested through a callback only when the key is encrypted,
so this module never touches the terminal itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from cryptography.hazmat.primitives import serialization

from airdrop.keys.address import is_bech32
from airdrop.keys.airdrop_key import AirdropKey
from airdrop.schemas.errors import KeyFormatError


logger = logging.getLogger(__name__)

PassphraseCallback = Callable[[], Optional[str]]

PGP_EXTENSIONS = (".asc", ".pgp", ".gpg")


@dataclass
class LoadedCredential:
    """A public identity and, when available, its private key."""
    kind: str  # "ssh", "pgp" or "addr"
    key: AirdropKey
    private_key: Any = None


def get_key_type(arg: str) -> str:
    """Classify a command-line argument as ``pgp``, ``addr`` or ``ssh``."""
    if Path(arg).suffix.lower() in PGP_EXTENSIONS:
        return "pgp"
    return "addr" if is_bech32(arg) else "ssh"


def _passphrase(callback: PassphraseCallback | None) -> bytes | None:
    if callback is None:
        return None
    value = callback()
    return value.encode("utf-8") if value else None


def read_ssh_key(data: bytes, passphrase: PassphraseCallback | None = None) -> LoadedCredential:
    """
    Load an SSH private key (OpenSSH or PEM container).

    Raises:
        KeyFormatError: If the file is not a supported private key or the
            passphrase is wrong
    """
    if b"BEGIN OPENSSH PRIVATE KEY" in data:
        loader = serialization.load_ssh_private_key
    else:
        loader = serialization.load_pem_private_key

    try:
        try:
            private_key = loader(data, password=None)
        except TypeError:
            # Encrypted key: ask for a passphrase and retry once.
            private_key = loader(data, password=_passphrase(passphrase))
    except (ValueError, TypeError) as e:
        raise KeyFormatError(f"Could not read SSH key: {e}") from e

    return LoadedCredential(
        kind="ssh",
        key=AirdropKey.from_ssh(private_key),
        private_key=private_key,
    )


def _normalize_key_id(key_id: str) -> str:
    value = key_id.strip().upper()
    if value.startswith("0X"):
        value = value[2:]
    value = value.replace(" ", "")
    if not value:
        raise KeyFormatError(f"Empty key ID: {key_id!r}")
    return value


def _iter_pgp_keys(blob: Any):
    import pgpy

    primary, others = pgpy.PGPKey.from_blob(blob)
    seen: set[int] = set()

    for key in [primary, *others.values()]:
        for candidate in [key, *key.subkeys.values()]:
            if id(candidate) not in seen:
                seen.add(id(candidate))
                yield candidate


def read_pgp_key(
    data: bytes,
    key_id: str,
    *,
    armored: bool,
    passphrase: PassphraseCallback | None = None,
) -> LoadedCredential:
    """
    Find ``key_id`` in a PGP keyring.

    Secret keys are preferred over public keys. Without a secret key only the
    public identity is returned and no nonce can be decrypted.

    Raises:
        KeyFormatError: If the key ID is empty, the keyring cannot be parsed
            or the key is absent
    """
    wanted = _normalize_key_id(key_id)

    try:
        import pgpy
        from pgpy.errors import PGPError
    except ImportError:
        raise ImportError("PGPy package required for PGP keys: pip install PGPy")

    blob = data.decode("utf-8") if armored else data

    try:
        candidates = list(_iter_pgp_keys(blob))
    except (PGPError, ValueError) as e:
        raise KeyFormatError(f"Could not read PGP keyring: {e}") from e

    matches = [
        k for k in candidates
        if str(k.fingerprint).replace(" ", "").upper().endswith(wanted)
    ]

    if not matches:
        raise KeyFormatError(f"Could not find key for ID: {key_id}.")

    secret = next((k for k in matches if not k.is_public), None)

    if secret is None:
        return LoadedCredential(kind="pgp", key=AirdropKey.from_pgp(matches[0]))

    try:
        if secret.is_protected:
            logger.info(f"I found key {key_id}, but it's encrypted.")
            value = _passphrase(passphrase)
            with secret.unlock(value.decode("utf-8") if value else ""):
                private_key = secret._key.keymaterial.__privkey__()
        else:
            private_key = secret._key.keymaterial.__privkey__()
    except (PGPError, NotImplementedError, ValueError) as e:
        raise KeyFormatError(f"Could not unlock PGP key: {e}") from e

    return LoadedCredential(
        kind="pgp",
        key=AirdropKey.from_pgp(secret),
        private_key=private_key,
    )


def read_key(
    path: str | Path,
    key_id: str | None = None,
    passphrase: PassphraseCallback | None = None,
) -> LoadedCredential:
    """
    Load a credential from a key file, choosing the parser by extension.

    Raises:
        KeyFormatError: If a PGP file is given without a key ID, or the
            file cannot be parsed
    """
    path = Path(path)
    data = path.read_bytes()
    ext = path.suffix.lower()

    if ext in PGP_EXTENSIONS:
        if not key_id:
            raise KeyFormatError("A key ID is required for PGP keyrings.")
        return read_pgp_key(data, key_id, armored=ext == ".asc", passphrase=passphrase)

    return read_ssh_key(data, passphrase)


__all__ = [
    "LoadedCredential",
    "PGP_EXTENSIONS",
    "get_key_type",
    "read_ssh_key",
    "read_pgp_key",
    "read_key",
]
