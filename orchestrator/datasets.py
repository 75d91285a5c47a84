"""
Dataset Store

Content-addressed access to the published airdrop datasets. Every file is
named by its path under the dataset base URL and pinned by a SHA-256 digest
from the manifest:

    tree.bin            bulk leaf groups
    faucet.bin          faucet leaves
    nonces/NNN.bin      encrypted nonces for bucket NNN
    proof.json          faucet/sponsor registry

Files are read from the local cache when present and downloaded otherwise.
The digest is checked on both paths; a download is only cached after it
matches. Parsed leaf sets are memoised for the lifetime of the store.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from airdrop.config import DatasetConfig
from airdrop.crypto.hashing import sha256
from airdrop.http import HttpClient
from airdrop.schemas.errors import ChecksumError
from airdrop.schemas.manifest import DatasetManifest
from airdrop.schemas.registry import ProofRegistryEntry, parse_registry
from airdrop.tree.leaves import LeafGroup, load_bulk, load_faucet
from airdrop.tree.nonces import BUCKET_COUNT, bucket_filename


logger = logging.getLogger(__name__)


class DatasetStore:
    """
    Reads published datasets through a checksum-verified local cache.

    Usage:
        store = DatasetStore(config.datasets, manifest, http=HttpClient())
        groups = store.read_leaves()
    """

    def __init__(
        self,
        config: DatasetConfig,
        manifest: DatasetManifest,
        http: Optional[HttpClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            config: Cache directory, base URL and download size limit
            manifest: Published digests and counts
            http: Client for downloads. Without one, missing files are errors.
            timeout: Download timeout (defaults to the client's)
        """
        self.config = config
        self.manifest = manifest
        self.http = http
        self.timeout = timeout
        self._leaves: Optional[list[LeafGroup]] = None
        self._faucet_leaves: Optional[list[bytes]] = None

    @property
    def cache_dir(self) -> Path:
        return Path(self.config.cache_dir).expanduser()

    def _ensure_dirs(self) -> None:
        self.cache_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        self.config.nonce_dir.mkdir(mode=0o755, parents=True, exist_ok=True)

    def _download(self, name: str) -> bytes:
        if self.http is None:
            raise FileNotFoundError(f"Dataset file not cached and downloads disabled: {name}")

        url = f"{self.config.base_url.rstrip('/')}/{name}"
        logger.info("Downloading: %s...", url)

        response = self.http.get(url, timeout=self.timeout, limit=self.config.size_limit)
        response.raise_for_status()
        return response.content

    def read_file(self, name: str, checksum: str) -> bytes:
        """
        Return the verified contents of ``name``.

        Args:
            name: Path relative to the cache directory and base URL
            checksum: Expected SHA-256 as hex

        Raises:
            ChecksumError: If the cached or downloaded bytes do not match
            FetchError: If the download fails
        """
        self._ensure_dirs()

        path = self.cache_dir / name
        base = path.name

        if path.exists():
            raw = path.read_bytes()
            actual = sha256(raw).hex()
            if actual != checksum:
                raise ChecksumError(base, expected=checksum, actual=actual)
            return raw

        raw = self._download(name)
        actual = sha256(raw).hex()

        if actual != checksum:
            raise ChecksumError(base, expected=checksum, actual=actual)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(raw)
        logger.debug(f"Cached {name} ({len(raw)} bytes)")

        return raw

    def read_tree_file(self) -> bytes:
        return self.read_file("tree.bin", self.manifest.tree.checksum)

    def read_faucet_file(self) -> bytes:
        return self.read_file("faucet.bin", self.manifest.faucet.checksum)

    def read_nonce_file(self, bucket: int) -> bytes:
        if not 0 <= bucket < BUCKET_COUNT:
            raise ValueError(f"Bucket out of range: {bucket}")
        return self.read_file(
            f"nonces/{bucket_filename(bucket)}",
            self.manifest.bucket_checksum(bucket),
        )

    def read_proof_file(self) -> list[ProofRegistryEntry]:
        raw = self.read_file("proof.json", self.manifest.proof_checksum)
        return parse_registry(raw.decode("utf-8"))

    def read_leaves(self) -> list[LeafGroup]:
        if self._leaves is None:
            self._leaves = load_bulk(
                self.read_tree_file(),
                self.manifest.tree.leaves,
                self.manifest.tree.keys,
            )
        return self._leaves

    def read_faucet_leaves(self) -> list[bytes]:
        if self._faucet_leaves is None:
            self._faucet_leaves = load_faucet(
                self.read_faucet_file(),
                self.manifest.faucet.leaves,
            )
        return self._faucet_leaves


__all__ = ["DatasetStore"]
