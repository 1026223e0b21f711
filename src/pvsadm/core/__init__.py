"""Core / service layer — domain models and workflow orchestration.

Rules
-----
* No ``print()`` calls.
* No SDK imports; providers arrive through :mod:`pvsadm.core.protocols`.
* No imports from ``cli`` or ``infra``.
"""

from pvsadm.core.image_service import ImageService
from pvsadm.core.import_service import ImageImportService
from pvsadm.core.models import (
    BucketLocation,
    HmacKeys,
    Image,
    ImageImportRequest,
    ImportOptions,
    PurgeResult,
    ResourceInstance,
    ServiceCredential,
)
from pvsadm.core.protocols import (
    ObjectStorageProvider,
    PowerImageProvider,
    ResourceControllerProvider,
)

__all__: list[str] = [
    "BucketLocation",
    "HmacKeys",
    "Image",
    "ImageImportRequest",
    "ImageImportService",
    "ImageService",
    "ImportOptions",
    "ObjectStorageProvider",
    "PowerImageProvider",
    "PurgeResult",
    "ResourceControllerProvider",
    "ResourceInstance",
    "ServiceCredential",
]
