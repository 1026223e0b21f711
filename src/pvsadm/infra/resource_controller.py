"""ibm-platform-services backed :class:`~pvsadm.core.protocols.ResourceControllerProvider`.

This module is the **only** place in the codebase that talks to the
IBM Cloud resource controller.  ``ApiException`` is caught here and
re-raised as :class:`~pvsadm.exceptions.ResourceControllerError`.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qs, urlparse

from pvsadm.core.models import HmacKeys, ResourceInstance, ServiceCredential
from pvsadm.exceptions import ResourceControllerError, missing_sdk_error

logger = logging.getLogger(__name__)

SERVICE_INSTANCE_TYPE: str = "service_instance"
PAGE_LIMIT: int = 100


class IbmResourceController:
    """Concrete :class:`ResourceControllerProvider` over ``ResourceControllerV2``.

    Usage::

        controller = IbmResourceController.from_authenticator(auth)
        instances = controller.list_service_instances()

    The wrapped *service* is injected so tests can pass a mock.
    """

    def __init__(self, service: Any) -> None:
        self._service = service

    @classmethod
    def from_authenticator(
        cls,
        authenticator: Any,
        *,
        timeout: float | None = None,
    ) -> IbmResourceController:
        """Build the SDK client for *authenticator*."""
        try:
            from ibm_platform_services import ResourceControllerV2
        except ModuleNotFoundError as exc:
            raise missing_sdk_error("ibm-platform-services") from exc

        service = ResourceControllerV2(authenticator=authenticator)
        if timeout is not None:
            service.set_http_config({"timeout": timeout})
        return cls(service)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list_service_instances(self) -> list[ResourceInstance]:
        """Return every service instance, following pagination."""
        instances: list[ResourceInstance] = []
        start: str | None = None
        while True:
            result = self._call(
                "list the resource instances",
                self._service.list_resource_instances,
                type=SERVICE_INSTANCE_TYPE,
                limit=PAGE_LIMIT,
                start=start,
            )
            instances.extend(_to_instance(raw) for raw in result.get("resources") or [])
            start = _next_start(result.get("next_url"))
            if start is None:
                break
        logger.debug("Found %d service instances", len(instances))
        return instances

    def list_resource_keys(self, name: str) -> list[ServiceCredential]:
        result = self._call(
            "list the service credentials",
            self._service.list_resource_keys,
            name=name,
        )
        return [_to_credential(raw) for raw in result.get("resources") or []]

    def create_hmac_resource_key(self, name: str, source: str) -> ServiceCredential:
        result = self._call(
            f"create the service credential {name}",
            self._service.create_resource_key,
            name=name,
            source=source,
            parameters={"HMAC": True},
        )
        return _to_credential(result)

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _call(action: str, method: Any, **kwargs: Any) -> dict[str, Any]:
        """Invoke an SDK *method* and return its JSON result."""
        try:
            from ibm_cloud_sdk_core import ApiException
        except ModuleNotFoundError as exc:
            raise missing_sdk_error("ibm-cloud-sdk-core") from exc

        try:
            response = method(**kwargs)
        except ApiException as exc:
            raise ResourceControllerError(
                f"failed to {action}: {exc.message} (status {exc.code})",
            ) from exc
        except Exception as exc:
            raise ResourceControllerError(f"failed to {action}: {exc}") from exc

        result = response.get_result()
        if not isinstance(result, dict):
            raise ResourceControllerError(
                f"failed to {action}: unexpected response payload",
            )
        return result


# ---------------------------------------------------------------------------
# Raw-dict → domain-model parsers
# ---------------------------------------------------------------------------

def _next_start(next_url: str | None) -> str | None:
    """Extract the ``start`` token from a ``next_url``."""
    if not next_url:
        return None
    values = parse_qs(urlparse(next_url).query).get("start")
    return values[0] if values else None


def _to_instance(raw: dict[str, Any]) -> ResourceInstance:
    return ResourceInstance(
        id=str(raw.get("id", "")),
        guid=str(raw.get("guid", "")),
        name=str(raw.get("name", "")),
        crn=str(raw.get("crn", "")),
        region_id=str(raw.get("region_id", "")),
        resource_id=str(raw.get("resource_id", "")),
    )


def _to_credential(raw: dict[str, Any]) -> ServiceCredential:
    credentials = raw.get("credentials")
    hmac_raw = credentials.get("cos_hmac_keys") if isinstance(credentials, dict) else None

    hmac_keys: HmacKeys | None = None
    if isinstance(hmac_raw, dict):
        access = hmac_raw.get("access_key_id")
        secret = hmac_raw.get("secret_access_key")
        if access and secret:
            hmac_keys = HmacKeys(access_key_id=str(access), secret_access_key=str(secret))

    return ServiceCredential(
        id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        source_crn=str(raw.get("source_crn", "")),
        hmac_keys=hmac_keys,
    )
