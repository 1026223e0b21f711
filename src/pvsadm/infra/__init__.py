"""Infrastructure layer — IBM Cloud SDK integration.

This layer wraps all interaction with the resource controller, Cloud
Object Storage and the PowerVS images API.  Every raw SDK exception
must be caught here and re-raised as a
:class:`~pvsadm.exceptions.PvsadmError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* SDK modules are imported lazily so a missing distribution surfaces
  as :class:`~pvsadm.exceptions.EnvironmentCheckError`.
"""

from pvsadm.infra.auth import build_authenticator
from pvsadm.infra.cos_client import IbmCosStorage, cos_storage_factory
from pvsadm.infra.power_client import PowerImagesClient, power_image_factory
from pvsadm.infra.regions import cos_endpoint, power_endpoint, region_for_zone
from pvsadm.infra.resource_controller import IbmResourceController

__all__: list[str] = [
    "IbmCosStorage",
    "IbmResourceController",
    "PowerImagesClient",
    "build_authenticator",
    "cos_endpoint",
    "cos_storage_factory",
    "power_endpoint",
    "power_image_factory",
    "region_for_zone",
]
