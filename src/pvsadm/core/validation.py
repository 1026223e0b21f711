"""Validation and normalisation of ``image import`` options.

Pure functions only: no I/O and no SDK access.
"""

from __future__ import annotations

from dataclasses import replace

from pvsadm.core.models import ImportOptions
from pvsadm.exceptions import InvalidOptionError

VALID_OS_TYPES: tuple[str, ...] = ("aix", "ibmi", "redhat", "sles")
VALID_STORAGE_TYPES: tuple[str, ...] = ("tier1", "tier3")


def normalize_os_type(os_type: str) -> str:
    """Lower-case *os_type* and check it against :data:`VALID_OS_TYPES`.

    An empty value is passed through unchanged.
    """
    normalized = os_type.strip().lower()
    if normalized and normalized not in VALID_OS_TYPES:
        raise InvalidOptionError(
            f"Invalid OS type: {os_type}",
            hint=f"Allowable values are [{', '.join(VALID_OS_TYPES)}]",
        )
    return normalized


def normalize_storage_type(storage_type: str) -> str:
    """Lower-case *storage_type* and check it against :data:`VALID_STORAGE_TYPES`."""
    normalized = storage_type.strip().lower()
    if normalized not in VALID_STORAGE_TYPES:
        raise InvalidOptionError(
            f"Invalid storage type: {storage_type}",
            hint=f"Allowable values are [{', '.join(VALID_STORAGE_TYPES)}]",
        )
    return normalized


def validate_import_options(options: ImportOptions) -> ImportOptions:
    """Return a normalised copy of *options* or raise :class:`InvalidOptionError`."""
    required = {
        "--bucket": options.bucket,
        "--region": options.region,
        "--object-name": options.object_name,
        "--image-name": options.image_name,
    }
    missing = [flag for flag, value in required.items() if not value.strip()]
    if missing:
        raise InvalidOptionError(
            f"Missing required option(s): {', '.join(missing)}",
        )

    if not options.instance_id and not options.instance_name:
        raise InvalidOptionError(
            "A PowerVS instance is required.",
            hint="Pass --instance-id or --instance-name.",
        )

    if not options.has_hmac_keys and not options.service_credential_name.strip():
        raise InvalidOptionError(
            "--service-credential-name must not be empty when "
            "--accesskey/--secretkey are not both given.",
        )

    return replace(
        options,
        os_type=normalize_os_type(options.os_type),
        storage_type=normalize_storage_type(options.storage_type),
    )
