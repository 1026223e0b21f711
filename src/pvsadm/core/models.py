"""Domain models for pvsadm.

All models are **frozen** dataclasses — immutable projections of the
vendor resources pvsadm touches.  They carry zero I/O and no SDK
imports; the infrastructure layer builds them from raw API payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pvsadm.core.protocols import ObjectStorageProvider

COS_CRN_MARKER: str = "cloud-object-storage"
POWER_CRN_MARKER: str = "power-iaas"


# ---------------------------------------------------------------------------
# Resource controller
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ResourceInstance:
    """A service instance reported by the resource controller."""

    id: str
    """Full resource ID (the instance CRN for service instances)."""

    guid: str
    """Short GUID, used as the PowerVS cloud-instance ID."""

    name: str
    """User-assigned instance name."""

    crn: str
    """Cloud Resource Name."""

    region_id: str = ""
    """Zone or region the instance lives in (e.g. ``lon04``)."""

    resource_id: str = ""
    """Catalog service ID."""

    @property
    def is_object_storage(self) -> bool:
        return COS_CRN_MARKER in self.crn

    @property
    def is_power_vs(self) -> bool:
        return POWER_CRN_MARKER in self.crn


@dataclass(frozen=True, slots=True)
class HmacKeys:
    """Access/secret key pair for S3-compatible object storage access."""

    access_key_id: str
    secret_access_key: str


@dataclass(frozen=True, slots=True)
class ServiceCredential:
    """A resource key (service credential) bound to a service instance."""

    id: str
    name: str
    source_crn: str
    hmac_keys: HmacKeys | None = None


# ---------------------------------------------------------------------------
# PowerVS images
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Image:
    """A PowerVS image as reported by the images API."""

    image_id: str
    name: str
    state: str = ""
    creation_date: datetime | None = None
    """Timezone-aware creation timestamp, or ``None`` if not reported."""

    storage_type: str = ""
    os_type: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class ImageImportRequest:
    """Parameters of a single remote image-import call."""

    image_name: str
    object_name: str
    region: str
    access_key: str
    secret_key: str
    bucket_name: str
    os_type: str
    storage_type: str


# ---------------------------------------------------------------------------
# Workflow inputs / outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ImportOptions:
    """User-supplied options of ``pvsadm image import``."""

    bucket: str
    region: str
    object_name: str
    image_name: str
    instance_id: str = ""
    instance_name: str = ""
    access_key: str = ""
    secret_key: str = ""
    os_type: str = "redhat"
    storage_type: str = "tier3"
    service_credential_name: str = "pvsadm-service-cred"

    @property
    def has_hmac_keys(self) -> bool:
        """Whether both halves of the HMAC key pair were supplied."""
        return bool(self.access_key) and bool(self.secret_key)


@dataclass(frozen=True, slots=True)
class BucketLocation:
    """The COS instance owning a bucket, with a storage client bound to it."""

    instance: ResourceInstance
    storage: ObjectStorageProvider


@dataclass(slots=True)
class PurgeResult:
    """Outcome of a purge run."""

    deleted: list[Image] = field(default_factory=list)
    failed: list[tuple[Image, Exception]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return not self.failed
