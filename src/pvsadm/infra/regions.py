"""PowerVS zone → region mapping and service endpoints."""

from __future__ import annotations

from pvsadm.exceptions import InvalidOptionError

# Ordered: longer prefixes first so ``us-south`` never matches ``us``.
_ZONE_PREFIXES: tuple[tuple[str, str], ...] = (
    ("us-south", "us-south"),
    ("us-east", "us-east"),
    ("eu-de", "eu-de"),
    ("dal", "us-south"),
    ("wdc", "us-east"),
    ("sao", "sao"),
    ("tor", "tor"),
    ("mon", "mon"),
    ("lon", "lon"),
    ("mad", "mad"),
    ("syd", "syd"),
    ("tok", "tok"),
    ("osa", "osa"),
    ("che", "che"),
)

POWER_ENDPOINT_TEMPLATE: str = "https://{region}.power-iaas.cloud.ibm.com"
COS_ENDPOINT_TEMPLATE: str = "https://s3.{region}.cloud-object-storage.appdomain.cloud"


def region_for_zone(zone: str) -> str:
    """Return the PowerVS API region serving *zone* (``lon04`` → ``lon``)."""
    normalized = zone.strip().lower()
    for prefix, region in _ZONE_PREFIXES:
        if normalized.startswith(prefix):
            return region
    raise InvalidOptionError(
        f"Unknown PowerVS zone: {zone!r}",
    )


def power_endpoint(zone: str) -> str:
    return POWER_ENDPOINT_TEMPLATE.format(region=region_for_zone(zone))


def cos_endpoint(region: str) -> str:
    return COS_ENDPOINT_TEMPLATE.format(region=region.strip().lower())
