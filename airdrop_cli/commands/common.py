"""
Shared wiring for CLI commands.
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from typing import Any

from airdrop.http import HttpClient
from airdrop.schemas.errors import AirdropException
from airdrop.schemas.manifest import DatasetManifest, load_manifest
from airdrop_cli.config import CLIConfig
from orchestrator import AirdropClaimer, AirdropRPCClient, DatasetStore


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def get_manifest(config: CLIConfig) -> DatasetManifest:
    path = config.manifest_path
    if not path.exists():
        raise FileNotFoundError(
            f"Dataset manifest not found: {path} "
            "(set datasets.manifest_path or AIRDROP_MANIFEST)"
        )
    return load_manifest(path)


def make_http(config: CLIConfig) -> HttpClient:
    runtime = config.runtime
    return HttpClient(
        timeout=runtime.http.timeout,
        default_headers={"User-Agent": runtime.http.user_agent},
        proxy=runtime.proxy,
    )


def make_claimer(config: CLIConfig, http: HttpClient) -> AirdropClaimer:
    """Wire dataset store, RPC client and manifest roots into a claimer."""
    runtime = config.runtime
    manifest = get_manifest(config)

    store = DatasetStore(runtime.datasets, manifest, http=http)
    rpc = AirdropRPCClient(runtime.network, http)

    return AirdropClaimer(
        store,
        rpc=rpc,
        expected=manifest.expected_roots(),
        bare=runtime.pipeline.bare,
    )


def report_error(e: AirdropException, output_json: bool) -> None:
    """Print an airdrop error as text or as the structured error model."""
    if output_json:
        print(json.dumps(e.to_error_model().model_dump(), indent=2))
    else:
        print(f"Error: {e.message}", file=sys.stderr)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def is_debug(args: Namespace) -> bool:
    return bool(getattr(args, "debug", False))
