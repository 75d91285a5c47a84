"""
Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for airdrop proof construction.
Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Dataset Errors
    CHECKSUM_MISMATCH = "CHECKSUM_MISMATCH"
    FORMAT_ERROR = "FORMAT_ERROR"

    # Credential Errors
    KEY_FORMAT_ERROR = "KEY_FORMAT_ERROR"
    INVALID_ADDRESS = "INVALID_ADDRESS"

    # Protocol Errors
    STATE_ERROR = "STATE_ERROR"
    NONCE_NOT_FOUND = "NONCE_NOT_FOUND"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    PROOF_VERIFICATION_FAILED = "PROOF_VERIFICATION_FAILED"

    # External Collaborator Errors
    FETCH_TIMEOUT = "FETCH_TIMEOUT"
    FETCH_FAILED = "FETCH_FAILED"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AirdropError(BaseModel):
    """
    Base error model for structured error reporting.

    Used by the CLI when emitting machine-readable (``--json``) failures.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CHECKSUM_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AirdropException(Exception):
    """
    Base exception for all airdrop errors.

    Carries structured error information and can be converted to an
    AirdropError model.
    """

    code: str = "AIRDROP_ERROR"
    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        self.details = details or {}

    def to_error_model(self) -> AirdropError:
        """Convert this exception to an AirdropError model."""
        return AirdropError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ChecksumError(AirdropException):
    """Downloaded or cached data does not match its published digest."""

    code = ErrorCodes.CHECKSUM_MISMATCH

    def __init__(
        self,
        name: str,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"file": name}
        if expected:
            details["expected"] = expected
        if actual:
            details["actual"] = actual
        super().__init__(f"Invalid checksum: {name}", details=details)
        self.name = name


class FormatError(AirdropException):
    """Structural parse failure of a binary dataset or encoding."""

    code = ErrorCodes.FORMAT_ERROR


class KeyFormatError(AirdropException):
    """Malformed or unsupported credential material."""

    code = ErrorCodes.KEY_FORMAT_ERROR


class InvalidAddressError(AirdropException):
    """Malformed textual address."""

    code = ErrorCodes.INVALID_ADDRESS

    def __init__(self, message: str, address: str | None = None) -> None:
        super().__init__(message, details={"address": address} if address else None)


class StateError(AirdropException):
    """Protocol misuse, e.g. applying a nonce to a key twice."""

    code = ErrorCodes.STATE_ERROR


class NonceNotFoundError(AirdropException):
    """No ciphertext in a bucket opened with the supplied private key."""

    code = ErrorCodes.NONCE_NOT_FOUND

    def __init__(self, bucket: int, tried: int = 0) -> None:
        super().__init__(
            f"Could not find nonce in bucket {bucket}.",
            details={"bucket": bucket, "tried": tried},
        )
        self.bucket = bucket
        self.tried = tried


class LeafNotFoundError(AirdropException):
    """The credential's commitment is not part of the published entitlement set."""

    code = ErrorCodes.LEAF_NOT_FOUND

    def __init__(self, target: bytes, message: str = "Could not find leaf.") -> None:
        super().__init__(message, details={"target": target.hex()})
        self.target = target


class ProofVerificationError(AirdropException):
    """A built proof failed local verification and must not be submitted."""

    code = ErrorCodes.PROOF_VERIFICATION_FAILED


class FetchError(AirdropException):
    """A dataset download failed."""

    code = ErrorCodes.FETCH_FAILED


class FetchTimeoutError(FetchError):
    """The external fetch collaborator exceeded its deadline."""

    code = ErrorCodes.FETCH_TIMEOUT
    retryable = True


class SubmissionError(AirdropException):
    """The node rejected or failed to process a submitted proof."""

    code = ErrorCodes.SUBMISSION_FAILED
