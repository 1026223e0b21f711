"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so every service can be driven by mocks in tests.

Implementations must map all SDK-specific exceptions to
:class:`~pvsadm.exceptions.PvsadmError` subclasses.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from pvsadm.core.models import (
    Image,
    ImageImportRequest,
    ResourceInstance,
    ServiceCredential,
)


class ResourceControllerProvider(Protocol):
    """Contract for the IBM Cloud resource controller."""

    def list_service_instances(self) -> list[ResourceInstance]:
        """Return every ``service_instance`` visible to the API key.

        Raises
        ------
        ResourceControllerError
            When the listing call fails.
        """
        ...  # pragma: no cover

    def list_resource_keys(self, name: str) -> list[ServiceCredential]:
        """Return the resource keys (service credentials) named *name*."""
        ...  # pragma: no cover

    def create_hmac_resource_key(self, name: str, source: str) -> ServiceCredential:
        """Create a resource key with HMAC keys for the instance *source*."""
        ...  # pragma: no cover


class ObjectStorageProvider(Protocol):
    """Contract for a COS client bound to one service instance."""

    def list_buckets(self) -> list[str]:
        """Return the names of all buckets owned by the instance."""
        ...  # pragma: no cover

    def object_exists(self, bucket: str, key: str) -> bool:
        """Return whether *key* exists in *bucket*.

        Raises
        ------
        ObjectStorageError
            When the probe fails for a reason other than "not found".
        """
        ...  # pragma: no cover


class PowerImageProvider(Protocol):
    """Contract for the images API of one PowerVS instance."""

    def list_images(self) -> list[Image]:
        ...  # pragma: no cover

    def get_image(self, image_id: str) -> Image:
        ...  # pragma: no cover

    def delete_image(self, image_id: str) -> None:
        ...  # pragma: no cover

    def import_image(self, request: ImageImportRequest) -> Image:
        """Start an import job for *request* and return the new image.

        Raises
        ------
        ImageImportError
            When the API accepted the call but did not start a job.
        PowerApiError
            When the API answers with an error status.
        """
        ...  # pragma: no cover


ObjectStorageFactory = Callable[[ResourceInstance, str], ObjectStorageProvider]
"""Builds an :class:`ObjectStorageProvider` for ``(instance, region)``."""

PowerImageFactory = Callable[[ResourceInstance], PowerImageProvider]
"""Builds a :class:`PowerImageProvider` for a PowerVS instance."""
