"""Shared pytest fixtures and factories for the pvsadm test suite.

Guidelines
----------
* No network access in any test.
* IBM SDK clients are mocked at the infra boundary.
* Core tests must be pure — providers are ``MagicMock`` objects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

import pytest

from pvsadm.core.models import HmacKeys, Image, ImportOptions, ResourceInstance, ServiceCredential

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

COS_CRN = "crn:v1:bluemix:public:cloud-object-storage:global:a/acc123:cos-guid-1::"
COS_CRN_2 = "crn:v1:bluemix:public:cloud-object-storage:global:a/acc123:cos-guid-2::"
POWER_CRN = "crn:v1:bluemix:public:power-iaas:lon04:a/acc123:pvs-guid-1::"


def make_instance(**overrides: Any) -> ResourceInstance:
    defaults: dict[str, Any] = {
        "id": COS_CRN,
        "guid": "cos-guid-1",
        "name": "cos-one",
        "crn": COS_CRN,
        "region_id": "global",
        "resource_id": "dff97f5c-bc5e-4455-b470-411c3edbe49c",
    }
    defaults.update(overrides)
    return ResourceInstance(**defaults)


def make_power_instance(**overrides: Any) -> ResourceInstance:
    defaults: dict[str, Any] = {
        "id": POWER_CRN,
        "guid": "pvs-guid-1",
        "name": "upstream-core-lon04",
        "crn": POWER_CRN,
        "region_id": "lon04",
        "resource_id": "abd259f0-9990-11e8-acc8-b9f54a8f1661",
    }
    defaults.update(overrides)
    return ResourceInstance(**defaults)


def make_image(**overrides: Any) -> Image:
    defaults: dict[str, Any] = {
        "image_id": "img-1",
        "name": "rhel-83",
        "state": "active",
        "creation_date": NOW,
        "storage_type": "tier3",
        "os_type": "rhel",
        "description": "",
    }
    defaults.update(overrides)
    return Image(**defaults)


def make_credential(**overrides: Any) -> ServiceCredential:
    defaults: dict[str, Any] = {
        "id": "key-1",
        "name": "pvsadm-service-cred",
        "source_crn": COS_CRN,
        "hmac_keys": HmacKeys(access_key_id="AK", secret_access_key="SK"),
    }
    defaults.update(overrides)
    return ServiceCredential(**defaults)


def make_options(**overrides: Any) -> ImportOptions:
    defaults: dict[str, Any] = {
        "bucket": "images-bucket",
        "region": "us-south",
        "object_name": "rhel-83-10032020.ova.gz",
        "image_name": "test-image",
        "instance_name": "upstream-core-lon04",
    }
    defaults.update(overrides)
    return ImportOptions(**defaults)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials and .env files out of the tests."""
    monkeypatch.delenv("IBMCLOUD_API_KEY", raising=False)
    monkeypatch.delenv("PVSADM_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PVSADM_TIMEOUT", raising=False)
    monkeypatch.setattr("pvsadm.config.load_dotenv", lambda: False)


@pytest.fixture(autouse=True)
def _restore_pvsadm_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so ``caplog`` sees records from every test."""
    logger = logging.getLogger("pvsadm")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
