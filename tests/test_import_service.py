"""Tests for the image-import workflow (core/import_service.py).

The resource controller, storage and PowerVS providers are all
**mocked** — no SDK, no network.  These tests verify:

* Bucket lookup (early exit, skipping broken instances)
* Object existence check
* HMAC key resolution (reuse, auto-generation, explicit keys)
* The request passed to the import call
* Exception wrapping (provider errors → our hierarchy)
"""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest

from conftest import (
    COS_CRN,
    COS_CRN_2,
    make_credential,
    make_image,
    make_instance,
    make_options,
    make_power_instance,
)
from pvsadm.core.import_service import ImageImportService
from pvsadm.core.models import HmacKeys, ImageImportRequest
from pvsadm.exceptions import (
    BucketNotFoundError,
    ImageImportError,
    InstanceNotFoundError,
    InvalidOptionError,
    ObjectNotFoundError,
    ObjectStorageError,
    PowerApiError,
    ResourceControllerError,
    ServiceCredentialError,
)

COS_TWO = make_instance(id=COS_CRN_2, guid="cos-guid-2", name="cos-two", crn=COS_CRN_2)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _storage(buckets: list[str] | Exception, *, exists: bool = True) -> MagicMock:
    storage = MagicMock()
    if isinstance(buckets, Exception):
        storage.list_buckets.side_effect = buckets
    else:
        storage.list_buckets.return_value = buckets
    storage.object_exists.return_value = exists
    return storage


class _Harness:
    """Bundle of mocks wired into an :class:`ImageImportService`."""

    def __init__(
        self,
        *,
        storages: dict[str, Any] | None = None,
        instances: list | None = None,
        keys: list | None = None,
    ) -> None:
        self.storages = storages if storages is not None else {
            "cos-one": _storage(["images-bucket"]),
        }
        self.controller = MagicMock()
        self.controller.list_service_instances.return_value = (
            instances if instances is not None else [make_power_instance(), make_instance()]
        )
        self.controller.list_resource_keys.return_value = (
            keys if keys is not None else [make_credential()]
        )
        self.power = MagicMock()
        self.power.import_image.return_value = make_image(
            image_id="new-img", name="test-image", state="queued",
        )
        self.storage_factory = MagicMock(side_effect=self._build_storage)
        self.power_factory = MagicMock(return_value=self.power)
        self.service = ImageImportService(
            self.controller, self.storage_factory, self.power_factory,
        )

    def _build_storage(self, instance: Any, region: str) -> Any:
        storage = self.storages[instance.name]
        if isinstance(storage, Exception):
            raise storage
        return storage


# ---------------------------------------------------------------------------
# locate_bucket
# ---------------------------------------------------------------------------

class TestLocateBucket:
    def test_finds_owning_instance(self) -> None:
        h = _Harness(storages={
            "cos-one": _storage(["other"]),
            "cos-two": _storage(["images-bucket"]),
        })
        location = h.service.locate_bucket(
            [make_instance(), COS_TWO], "images-bucket", "us-south",
        )
        assert location.instance.name == "cos-two"
        assert location.storage is h.storages["cos-two"]

    def test_stops_at_first_match(self) -> None:
        h = _Harness(storages={
            "cos-one": _storage(["images-bucket"]),
            "cos-two": _storage(["images-bucket"]),
        })
        location = h.service.locate_bucket(
            [make_instance(), COS_TWO], "images-bucket", "us-south",
        )
        assert location.instance.name == "cos-one"
        h.storages["cos-two"].list_buckets.assert_not_called()

    def test_region_forwarded_to_factory(self) -> None:
        h = _Harness()
        h.service.locate_bucket([make_instance()], "images-bucket", "eu-de")
        h.storage_factory.assert_called_once_with(make_instance(), "eu-de")

    def test_skips_instance_whose_client_fails(self) -> None:
        h = _Harness(storages={
            "cos-one": RuntimeError("no endpoint"),
            "cos-two": _storage(["images-bucket"]),
        })
        location = h.service.locate_bucket(
            [make_instance(), COS_TWO], "images-bucket", "us-south",
        )
        assert location.instance.name == "cos-two"

    def test_skips_instance_whose_listing_fails(self) -> None:
        h = _Harness(storages={
            "cos-one": _storage(ObjectStorageError("denied")),
            "cos-two": _storage(["images-bucket"]),
        })
        location = h.service.locate_bucket(
            [make_instance(), COS_TWO], "images-bucket", "us-south",
        )
        assert location.instance.name == "cos-two"

    def test_ignores_non_cos_instances(self) -> None:
        h = _Harness()
        with pytest.raises(BucketNotFoundError):
            h.service.locate_bucket([make_power_instance()], "images-bucket", "us-south")
        h.storage_factory.assert_not_called()

    def test_logs_owning_instance(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pvsadm")
        _Harness().service.locate_bucket([make_instance()], "images-bucket", "us-south")
        assert (
            f"images-bucket bucket found in the cos-one[ID:{COS_CRN}] COS instance"
            in caplog.messages
        )

    def test_not_found_message(self) -> None:
        h = _Harness(storages={"cos-one": _storage([])})
        with pytest.raises(BucketNotFoundError) as exc_info:
            h.service.locate_bucket([make_instance()], "images-bucket", "us-south")
        assert str(exc_info.value) == (
            "failed to find the COS instance for the bucket mentioned: images-bucket"
        )


# ---------------------------------------------------------------------------
# verify_object
# ---------------------------------------------------------------------------

class TestVerifyObject:
    def test_present(self) -> None:
        storage = _storage([], exists=True)
        _Harness().service.verify_object(storage, "b", "o.ova.gz")
        storage.object_exists.assert_called_once_with("b", "o.ova.gz")

    def test_logs_found_object(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pvsadm")
        _Harness().service.verify_object(_storage([]), "b", "o.ova.gz")
        assert "o.ova.gz object found in the b bucket" in caplog.messages

    def test_missing(self) -> None:
        with pytest.raises(ObjectNotFoundError, match="o.ova.gz in b bucket"):
            _Harness().service.verify_object(_storage([], exists=False), "b", "o.ova.gz")

    def test_storage_error_propagates(self) -> None:
        storage = _storage([])
        storage.object_exists.side_effect = ObjectStorageError("forbidden")
        with pytest.raises(ObjectStorageError, match="forbidden"):
            _Harness().service.verify_object(storage, "b", "o")

    def test_unexpected_error_wrapped(self) -> None:
        storage = _storage([])
        storage.object_exists.side_effect = RuntimeError("boom")
        with pytest.raises(ObjectStorageError, match="failed to check the object o: boom"):
            _Harness().service.verify_object(storage, "b", "o")


# ---------------------------------------------------------------------------
# resolve_hmac_keys
# ---------------------------------------------------------------------------

class TestResolveHmacKeys:
    def test_reuses_existing_credential(self) -> None:
        h = _Harness()
        keys = h.service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")
        assert keys == HmacKeys(access_key_id="AK", secret_access_key="SK")
        h.controller.list_resource_keys.assert_called_once_with("pvsadm-service-cred")
        h.controller.create_hmac_resource_key.assert_not_called()

    def test_logs_reused_credential(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pvsadm")
        _Harness().service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")
        assert "Reading the existing service credential: pvsadm-service-cred" in caplog.messages

    def test_prefers_credential_of_bucket_instance(self) -> None:
        other = make_credential(
            id="key-other",
            source_crn=COS_CRN_2,
            hmac_keys=HmacKeys("OTHER", "OTHER-SECRET"),
        )
        h = _Harness(keys=[other, make_credential()])
        keys = h.service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")
        assert keys.access_key_id == "AK"

    def test_falls_back_to_first_credential(self) -> None:
        other = make_credential(source_crn=COS_CRN_2, hmac_keys=HmacKeys("OTHER", "S"))
        h = _Harness(keys=[other])
        keys = h.service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")
        assert keys.access_key_id == "OTHER"

    def test_generates_credential_when_absent(self) -> None:
        h = _Harness(keys=[])
        h.controller.create_hmac_resource_key.return_value = make_credential(
            hmac_keys=HmacKeys("NEW-AK", "NEW-SK"),
        )
        keys = h.service.resolve_hmac_keys(make_instance(), "my-cred")
        assert keys == HmacKeys("NEW-AK", "NEW-SK")
        h.controller.create_hmac_resource_key.assert_called_once_with("my-cred", COS_CRN)

    def test_logs_generated_credential(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pvsadm")
        h = _Harness(keys=[])
        h.controller.create_hmac_resource_key.return_value = make_credential()
        h.service.resolve_hmac_keys(make_instance(), "my-cred")
        assert (
            "Auto Generating the COS Service credential for importing the image with name: my-cred"
            in caplog.messages
        )

    def test_credential_without_hmac_keys(self) -> None:
        h = _Harness(keys=[make_credential(hmac_keys=None)])
        with pytest.raises(ServiceCredentialError, match="cos_hmac_keys"):
            h.service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")

    def test_listing_error_propagates(self) -> None:
        h = _Harness()
        h.controller.list_resource_keys.side_effect = ResourceControllerError("denied")
        with pytest.raises(ResourceControllerError, match="denied"):
            h.service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")

    def test_unexpected_listing_error_wrapped(self) -> None:
        h = _Harness()
        h.controller.list_resource_keys.side_effect = ValueError("bad")
        with pytest.raises(
            ServiceCredentialError, match="failed to list the service credentials: bad",
        ):
            h.service.resolve_hmac_keys(make_instance(), "pvsadm-service-cred")


# ---------------------------------------------------------------------------
# run — end to end over mocks
# ---------------------------------------------------------------------------

class TestRun:
    def test_happy_path_with_generated_keys(self) -> None:
        h = _Harness()
        image = h.service.run(make_options(os_type="SLES", storage_type="TIER1"))

        assert image.image_id == "new-img"
        h.power_factory.assert_called_once_with(make_power_instance())
        h.power.import_image.assert_called_once_with(
            ImageImportRequest(
                image_name="test-image",
                object_name="rhel-83-10032020.ova.gz",
                region="us-south",
                access_key="AK",
                secret_key="SK",
                bucket_name="images-bucket",
                os_type="sles",
                storage_type="tier1",
            ),
        )

    def test_logs_import_state(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="pvsadm")
        _Harness().service.run(make_options())
        assert (
            "Importing Image test-image is currently in queued state, "
            "Please check the Progress in the IBM Cloud UI"
        ) in caplog.messages

    def test_explicit_keys_skip_credentials(self) -> None:
        h = _Harness()
        h.service.run(make_options(access_key="MY-AK", secret_key="MY-SK"))

        h.controller.list_resource_keys.assert_not_called()
        request = h.power.import_image.call_args.args[0]
        assert (request.access_key, request.secret_key) == ("MY-AK", "MY-SK")

    def test_partial_keys_still_resolve_credentials(self) -> None:
        h = _Harness()
        h.service.run(make_options(access_key="MY-AK"))

        h.controller.list_resource_keys.assert_called_once()
        request = h.power.import_image.call_args.args[0]
        assert request.access_key == "AK"

    def test_invalid_options_fail_before_any_call(self) -> None:
        h = _Harness()
        with pytest.raises(InvalidOptionError):
            h.service.run(make_options(os_type="windows"))
        h.controller.list_service_instances.assert_not_called()

    def test_unknown_power_instance_fails_before_bucket_scan(self) -> None:
        h = _Harness()
        with pytest.raises(InstanceNotFoundError):
            h.service.run(make_options(instance_name="missing"))
        h.storage_factory.assert_not_called()

    def test_missing_object_stops_before_credentials(self) -> None:
        h = _Harness(storages={"cos-one": _storage(["images-bucket"], exists=False)})
        with pytest.raises(ObjectNotFoundError):
            h.service.run(make_options())
        h.controller.list_resource_keys.assert_not_called()
        h.power.import_image.assert_not_called()

    def test_instance_listing_failure_wrapped(self) -> None:
        h = _Harness()
        h.controller.list_service_instances.side_effect = RuntimeError("timeout")
        with pytest.raises(ResourceControllerError, match="service instances: timeout"):
            h.service.run(make_options())

    def test_import_api_error_propagates(self) -> None:
        h = _Harness()
        h.power.import_image.side_effect = PowerApiError("quota", status_code=400)
        with pytest.raises(PowerApiError, match="quota"):
            h.service.run(make_options())

    def test_unexpected_import_error_wrapped(self) -> None:
        h = _Harness()
        h.power.import_image.side_effect = KeyError("imageID")
        with pytest.raises(ImageImportError, match="failed to import the image test-image"):
            h.service.run(make_options())
