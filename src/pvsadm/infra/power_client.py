"""PowerVS images API client — implementation of :class:`~pvsadm.core.protocols.PowerImageProvider`.

Requests go through an ``ibm_cloud_sdk_core.BaseService`` so that IAM
token handling, HTTP configuration and error decoding match the other
IBM SDK clients.  ``ApiException`` is caught here and re-raised as
:class:`~pvsadm.exceptions.PowerApiError`.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from pvsadm.core.models import Image, ImageImportRequest, ResourceInstance
from pvsadm.exceptions import ImageImportError, PowerApiError, missing_sdk_error
from pvsadm.infra.regions import power_endpoint

logger = logging.getLogger(__name__)

IMAGES_PATH: str = "/pcloud/v1/cloud-instances/{cloud_instance_id}/images"
IMPORT_SOURCE: str = "url"
QUEUED_STATE: str = "queued"

# fromisoformat before 3.11 only takes 3 or 6 fractional digits.
_FRACTION = re.compile(r"\.(\d+)")


class PowerImagesClient:
    """Concrete :class:`PowerImageProvider` for one PowerVS instance.

    Parameters
    ----------
    service:
        A ``BaseService`` (or compatible mock) pointed at the regional
        PowerVS endpoint.
    cloud_instance_id:
        The instance GUID.
    crn:
        The instance CRN, sent in the ``CRN`` header of every request.
    """

    def __init__(self, service: Any, cloud_instance_id: str, crn: str) -> None:
        self._service = service
        self._cloud_instance_id = cloud_instance_id
        self._crn = crn

    @classmethod
    def for_instance(
        cls,
        authenticator: Any,
        instance: ResourceInstance,
        *,
        timeout: float | None = None,
    ) -> PowerImagesClient:
        """Build a client for *instance* at the endpoint of its zone."""
        try:
            from ibm_cloud_sdk_core import BaseService
        except ModuleNotFoundError as exc:
            raise missing_sdk_error("ibm-cloud-sdk-core") from exc

        service = BaseService(
            service_url=power_endpoint(instance.region_id),
            authenticator=authenticator,
        )
        if timeout is not None:
            service.set_http_config({"timeout": timeout})
        return cls(service, instance.guid, instance.crn)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list_images(self) -> list[Image]:
        _, result = self._request("GET", self._images_path(), action="list the images")
        return [_to_image(raw) for raw in (result or {}).get("images") or []]

    def get_image(self, image_id: str) -> Image:
        _, result = self._request(
            "GET", self._image_path(image_id), action=f"get the image {image_id}",
        )
        return _to_image(result or {})

    def delete_image(self, image_id: str) -> None:
        self._request(
            "DELETE", self._image_path(image_id), action=f"delete the image {image_id}",
        )

    def import_image(self, request: ImageImportRequest) -> Image:
        """POST an import job with ``source=url`` for *request*."""
        body = {
            "source": IMPORT_SOURCE,
            "imageName": request.image_name,
            "imageFilename": request.object_name,
            "region": request.region,
            "accessKey": request.access_key,
            "secretKey": request.secret_key,
            "bucketName": request.bucket_name,
            "osType": request.os_type,
            "diskType": request.storage_type,
        }
        status, result = self._request(
            "POST",
            self._images_path(),
            action=f"import the image {request.image_name}",
            body=body,
        )

        # 200 answers an existing image instead of starting a job.
        if status == 200:
            logger.error("Failed to initiate the import job")
            raise ImageImportError(
                "Failed to initiate the import job",
                hint=f"An image named {request.image_name} may already exist.",
            )

        image = _to_image(result or {})
        if image.state == QUEUED_STATE:
            logger.info("Post is successful %s", image.image_id)
        return image

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _images_path(self) -> str:
        return IMAGES_PATH.format(cloud_instance_id=quote(self._cloud_instance_id, safe=""))

    def _image_path(self, image_id: str) -> str:
        return f"{self._images_path()}/{quote(image_id, safe='')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        body: dict[str, Any] | None = None,
    ) -> tuple[int, Any]:
        """Send one request and return ``(status_code, json_result)``."""
        try:
            from ibm_cloud_sdk_core import ApiException
        except ModuleNotFoundError as exc:
            raise missing_sdk_error("ibm-cloud-sdk-core") from exc

        headers = {"Accept": "application/json", "CRN": self._crn}
        data: str | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body)

        try:
            prepared = self._service.prepare_request(
                method=method, url=path, headers=headers, data=data,
            )
            response = self._service.send(prepared)
        except ApiException as exc:
            raise PowerApiError(
                f"failed to {action}: {exc.message}",
                status_code=exc.code,
            ) from exc
        except Exception as exc:
            raise PowerApiError(f"failed to {action}: {exc}") from exc

        return response.get_status_code(), response.get_result()


def power_image_factory(
    authenticator: Any,
    *,
    timeout: float | None = None,
) -> Callable[[ResourceInstance], PowerImagesClient]:
    """Return a factory building :class:`PowerImagesClient` per instance."""

    def build(instance: ResourceInstance) -> PowerImagesClient:
        return PowerImagesClient.for_instance(authenticator, instance, timeout=timeout)

    return build


# ---------------------------------------------------------------------------
# Raw-dict → domain-model parsers
# ---------------------------------------------------------------------------

def parse_timestamp(value: object) -> datetime | None:
    """Parse an RFC 3339 timestamp (``2020-10-03T10:20:30.000Z``)."""
    if not isinstance(value, str) or not value:
        return None
    text = value.replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_image(raw: dict[str, Any]) -> Image:
    specifications = raw.get("specifications")
    os_type = ""
    if isinstance(specifications, dict):
        os_type = str(specifications.get("operatingSystem") or "")
    return Image(
        image_id=str(raw.get("imageID", "")),
        name=str(raw.get("name", "")),
        state=str(raw.get("state") or ""),
        creation_date=parse_timestamp(raw.get("creationDate")),
        storage_type=str(raw.get("storageType") or ""),
        os_type=os_type,
        description=str(raw.get("description") or ""),
    )
