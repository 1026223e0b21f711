"""Construction of the IBM Cloud clients shared by every command.

Commands receive a :class:`CloudContext` instead of building SDK clients
themselves, which keeps the handlers testable with a mocked context.
"""

from __future__ import annotations

from dataclasses import dataclass

from pvsadm.config import Settings
from pvsadm.core.image_service import ImageService
from pvsadm.core.import_service import ImageImportService
from pvsadm.core.instances import find_power_instance
from pvsadm.core.protocols import (
    ObjectStorageFactory,
    PowerImageFactory,
    ResourceControllerProvider,
)


@dataclass(frozen=True, slots=True)
class CloudContext:
    """Providers bound to one API key."""

    resource_controller: ResourceControllerProvider
    storage_factory: ObjectStorageFactory
    power_factory: PowerImageFactory

    @classmethod
    def from_settings(cls, settings: Settings) -> CloudContext:
        """Authenticate with the configured API key and build every client."""
        from pvsadm.infra.auth import build_authenticator
        from pvsadm.infra.cos_client import cos_storage_factory
        from pvsadm.infra.power_client import power_image_factory
        from pvsadm.infra.resource_controller import IbmResourceController

        api_key = settings.require_api_key()
        authenticator = build_authenticator(api_key)
        return cls(
            resource_controller=IbmResourceController.from_authenticator(
                authenticator, timeout=settings.timeout,
            ),
            storage_factory=cos_storage_factory(api_key, timeout=settings.timeout),
            power_factory=power_image_factory(authenticator, timeout=settings.timeout),
        )

    def import_service(self) -> ImageImportService:
        return ImageImportService(
            self.resource_controller,
            self.storage_factory,
            self.power_factory,
        )

    def image_service(self, *, instance_id: str = "", instance_name: str = "") -> ImageService:
        """Resolve a PowerVS instance and return an :class:`ImageService` for it."""
        instance = find_power_instance(
            self.resource_controller.list_service_instances(),
            instance_id=instance_id,
            instance_name=instance_name,
        )
        return ImageService(self.power_factory(instance))
