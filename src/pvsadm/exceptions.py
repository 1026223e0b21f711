"""Custom exception hierarchy for pvsadm.

All exceptions that cross layer boundaries must inherit from
:class:`PvsadmError`.  Raw IBM SDK exceptions (``ApiException``,
``ClientError``) must NEVER propagate beyond the infrastructure layer —
they must be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
PvsadmError
├── InvalidOptionError
├── AuthenticationError
├── ResourceControllerError
├── ObjectStorageError
├── BucketNotFoundError
├── ObjectNotFoundError
├── ServiceCredentialError
├── InstanceNotFoundError
├── PowerApiError
├── ImageImportError
├── ImageDeleteError
└── EnvironmentCheckError
"""

from __future__ import annotations


class PvsadmError(Exception):
    """Base exception for all pvsadm errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- User input ------------------------------------------------------------

class InvalidOptionError(PvsadmError):
    """Raised when a command-line option fails validation."""


class AuthenticationError(PvsadmError):
    """Raised when no usable IBM Cloud API key is available."""


# --- Resource controller / object storage ----------------------------------

class ResourceControllerError(PvsadmError):
    """Raised when a resource controller call fails."""


class ObjectStorageError(PvsadmError):
    """Raised when a Cloud Object Storage call fails."""


class BucketNotFoundError(PvsadmError):
    """Raised when no COS instance owns the requested bucket."""


class ObjectNotFoundError(PvsadmError):
    """Raised when the image object is missing from the bucket."""


class ServiceCredentialError(PvsadmError):
    """Raised when HMAC keys cannot be read from a service credential."""


# --- PowerVS ---------------------------------------------------------------

class InstanceNotFoundError(PvsadmError):
    """Raised when the requested PowerVS instance does not exist."""


class PowerApiError(PvsadmError):
    """Raised when the PowerVS API answers with an error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code


class ImageImportError(PvsadmError):
    """Raised when the image import job could not be initiated."""


class ImageDeleteError(PvsadmError):
    """Raised when an image could not be deleted during a purge."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentCheckError(PvsadmError):
    """Raised when a required runtime dependency is not available."""


def missing_sdk_error(distribution: str) -> EnvironmentCheckError:
    """Build the error raised when a required distribution is not installed."""
    return EnvironmentCheckError(
        f"{distribution} is not installed.",
        hint=f"Install with: pip install {distribution}",
    )
