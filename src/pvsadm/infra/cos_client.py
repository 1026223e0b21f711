"""ibm-cos-sdk backed :class:`~pvsadm.core.protocols.ObjectStorageProvider`.

This module is the **only** place in the codebase that imports
``ibm_boto3``.  ``ClientError`` and ``BotoCoreError`` (connection,
credential and endpoint failures) are caught here and re-raised as
:class:`~pvsadm.exceptions.ObjectStorageError` — nothing raw escapes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pvsadm.core.models import ResourceInstance
from pvsadm.exceptions import ObjectStorageError, missing_sdk_error
from pvsadm.infra.regions import cos_endpoint

# Error codes ``head_object`` reports for a missing key.
_NOT_FOUND_CODES: frozenset[str] = frozenset({"404", "NoSuchKey", "NotFound"})


def _load_sdk_errors() -> tuple[type[Exception], type[Exception]]:
    """Return ``(ClientError, BotoCoreError)`` from ``ibm_botocore``."""
    try:
        from ibm_botocore.exceptions import BotoCoreError, ClientError
    except ModuleNotFoundError as exc:
        raise missing_sdk_error("ibm-cos-sdk") from exc
    return ClientError, BotoCoreError


class IbmCosStorage:
    """Concrete :class:`ObjectStorageProvider` over an ``ibm_boto3`` S3 client.

    The S3 *client* is injected so tests can pass a mock; use
    :func:`cos_storage_factory` to build real ones.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    def list_buckets(self) -> list[str]:
        client_error, botocore_error = _load_sdk_errors()
        try:
            response = self._client.list_buckets()
        except (client_error, botocore_error) as exc:
            raise ObjectStorageError(f"failed to list the buckets: {exc}") from exc
        return [str(bucket["Name"]) for bucket in response.get("Buckets") or []]

    def object_exists(self, bucket: str, key: str) -> bool:
        """Check *key* with ``head_object``; only "not found" answers ``False``."""
        client_error, botocore_error = _load_sdk_errors()
        try:
            self._client.head_object(Bucket=bucket, Key=key)
        except botocore_error as exc:
            raise ObjectStorageError(
                f"failed to check the object {key} in {bucket} bucket: {exc}",
            ) from exc
        except client_error as exc:
            code = str(getattr(exc, "response", {}).get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return False
            raise ObjectStorageError(
                f"failed to check the object {key} in {bucket} bucket: {exc}",
            ) from exc
        return True


def cos_storage_factory(
    api_key: str,
    *,
    timeout: float | None = None,
) -> Callable[[ResourceInstance, str], IbmCosStorage]:
    """Return a factory building :class:`IbmCosStorage` for ``(instance, region)``.

    Clients authenticate with the IAM API key (OAuth signature) against
    the regional public endpoint.
    """
    try:
        import ibm_boto3
        from ibm_botocore.client import Config
    except ModuleNotFoundError as exc:
        raise missing_sdk_error("ibm-cos-sdk") from exc

    def build(instance: ResourceInstance, region: str) -> IbmCosStorage:
        config_kwargs: dict[str, Any] = {"signature_version": "oauth"}
        if timeout is not None:
            config_kwargs["connect_timeout"] = timeout
            config_kwargs["read_timeout"] = timeout
        client = ibm_boto3.client(
            "s3",
            ibm_api_key_id=api_key,
            ibm_service_instance_id=instance.crn,
            config=Config(**config_kwargs),
            endpoint_url=cos_endpoint(region),
        )
        return IbmCosStorage(client)

    return build
