"""Lookups over the resource controller's service-instance listing."""

from __future__ import annotations

from collections.abc import Sequence

from pvsadm.core.models import ResourceInstance
from pvsadm.exceptions import InstanceNotFoundError, InvalidOptionError


def object_storage_instances(
    instances: Sequence[ResourceInstance],
) -> list[ResourceInstance]:
    """Return the Cloud Object Storage instances, in listing order."""
    return [instance for instance in instances if instance.is_object_storage]


def find_power_instance(
    instances: Sequence[ResourceInstance],
    *,
    instance_id: str = "",
    instance_name: str = "",
) -> ResourceInstance:
    """Find a PowerVS instance by ID (GUID or full ID) or by name.

    The ID wins when both are given.
    """
    if not instance_id and not instance_name:
        raise InvalidOptionError(
            "A PowerVS instance is required.",
            hint="Pass --instance-id or --instance-name.",
        )

    candidates = [instance for instance in instances if instance.is_power_vs]
    for instance in candidates:
        if instance_id:
            if instance_id in (instance.guid, instance.id, instance.crn):
                return instance
        elif instance.name == instance_name:
            return instance

    wanted = f"ID {instance_id}" if instance_id else f"name {instance_name}"
    raise InstanceNotFoundError(
        f"PowerVS instance with {wanted} not found.",
        hint="Check the instance exists in the account the API key belongs to.",
    )
