"""
Dataset Manifest
File: manifest.py

Purpose: Published constants the downloaded datasets are checked against:
SHA-256 checksums, leaf-group and key totals, faucet leaf count, and
optionally the published merkle roots.

The ``tree`` and ``faucet`` sections accept the layout of the published
``tree.json`` and ``faucet.json`` files unchanged.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from airdrop.proof.airdrop_proof import ExpectedRoots
from airdrop.tree.nonces import BUCKET_COUNT


# Checksum of the faucet/sponsor registry (proof.json).
PROOF_CHECKSUM = "f0998ad5fee51173f4258ea155b860ac9faf5ffd437f89f9b8b12c0794a1602f"


def _check_digest(value: str) -> str:
    value = value.lower()
    if len(value) != 64:
        raise ValueError(f"Checksum must be 64 hex characters, got {len(value)}")
    bytes.fromhex(value)
    return value


class TreeManifest(BaseModel):
    """Published constants of the bulk tree."""

    model_config = ConfigDict(extra="ignore")

    checksum: str = Field(..., description="SHA-256 of tree.bin")
    leaves: int = Field(..., ge=0, description="Number of leaf groups")
    keys: int = Field(..., ge=0, description="Number of hashes across all groups")
    checksums: list[str] = Field(..., description="SHA-256 of every nonce bucket file")
    reward: int = Field(default=0, ge=0, description="Reward per key in dollarydoos")
    root: Optional[str] = Field(default=None, description="Published airdrop root")

    @field_validator("checksum")
    @classmethod
    def _validate_checksum(cls, value: str) -> str:
        return _check_digest(value)

    @field_validator("checksums")
    @classmethod
    def _validate_checksums(cls, value: list[str]) -> list[str]:
        if len(value) != BUCKET_COUNT:
            raise ValueError(f"Expected {BUCKET_COUNT} bucket checksums, got {len(value)}")
        return [_check_digest(v) for v in value]

    @field_validator("root")
    @classmethod
    def _validate_root(cls, value: Optional[str]) -> Optional[str]:
        return _check_digest(value) if value is not None else None


class FaucetManifest(BaseModel):
    """Published constants of the faucet tree."""

    model_config = ConfigDict(extra="ignore")

    checksum: str = Field(..., description="SHA-256 of faucet.bin")
    leaves: int = Field(..., ge=0, description="Number of faucet leaves")
    root: Optional[str] = Field(default=None, description="Published faucet root")

    @field_validator("checksum")
    @classmethod
    def _validate_checksum(cls, value: str) -> str:
        return _check_digest(value)

    @field_validator("root")
    @classmethod
    def _validate_root(cls, value: Optional[str]) -> Optional[str]:
        return _check_digest(value) if value is not None else None


class DatasetManifest(BaseModel):
    """All published dataset constants."""

    model_config = ConfigDict(extra="forbid")

    tree: TreeManifest
    faucet: FaucetManifest
    proof_checksum: str = Field(default=PROOF_CHECKSUM)

    @field_validator("proof_checksum")
    @classmethod
    def _validate_proof_checksum(cls, value: str) -> str:
        return _check_digest(value)

    def bucket_checksum(self, bucket: int) -> str:
        if not 0 <= bucket < BUCKET_COUNT:
            raise ValueError(f"Bucket out of range: {bucket}")
        return self.tree.checksums[bucket]

    def expected_roots(self) -> ExpectedRoots:
        """Leaf counts always; roots only when published."""
        return ExpectedRoots(
            airdrop_root=bytes.fromhex(self.tree.root) if self.tree.root else None,
            airdrop_leaves=self.tree.leaves,
            faucet_root=bytes.fromhex(self.faucet.root) if self.faucet.root else None,
            faucet_leaves=self.faucet.leaves,
        )


def load_manifest(path: str | Path) -> DatasetManifest:
    """
    Load a manifest from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() in (".yaml", ".yml"):
        import yaml
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)

    return DatasetManifest.model_validate(data)


__all__ = [
    "PROOF_CHECKSUM",
    "TreeManifest",
    "FaucetManifest",
    "DatasetManifest",
    "load_manifest",
]
