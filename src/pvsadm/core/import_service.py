"""Core image-import service — orchestrates the ``image import`` workflow.

The workflow is a straight sequence of provider calls:

1. Find the COS instance that owns the bucket.
2. Check the image object exists in that bucket.
3. Read or auto-generate HMAC keys, unless the user supplied both keys.
4. Ask the PowerVS instance to import the object.

Providers are injected at construction time, keeping this module free
of any SDK imports.

Guarantees
----------
* Only :class:`~pvsadm.exceptions.PvsadmError` subclasses escape.
* The bucket scan stops at the first COS instance owning the bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from pvsadm.core.instances import find_power_instance, object_storage_instances
from pvsadm.core.models import (
    BucketLocation,
    HmacKeys,
    Image,
    ImageImportRequest,
    ImportOptions,
    ResourceInstance,
    ServiceCredential,
)
from pvsadm.core.protocols import (
    ObjectStorageFactory,
    ObjectStorageProvider,
    PowerImageFactory,
    ResourceControllerProvider,
)
from pvsadm.core.validation import validate_import_options
from pvsadm.exceptions import (
    BucketNotFoundError,
    ImageImportError,
    ObjectNotFoundError,
    ObjectStorageError,
    PvsadmError,
    ResourceControllerError,
    ServiceCredentialError,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class ImageImportService:
    """Drives a single image import.

    Parameters
    ----------
    resource_controller:
        Lists service instances and manages service credentials.
    storage_factory:
        Builds a COS client for ``(instance, region)``.
    power_factory:
        Builds an images client for a PowerVS instance.
    """

    def __init__(
        self,
        resource_controller: ResourceControllerProvider,
        storage_factory: ObjectStorageFactory,
        power_factory: PowerImageFactory,
    ) -> None:
        self._resource_controller = resource_controller
        self._storage_factory = storage_factory
        self._power_factory = power_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, options: ImportOptions) -> Image:
        """Validate *options* and run the whole import workflow."""
        opts = validate_import_options(options)

        instances = _guard(
            self._resource_controller.list_service_instances,
            "failed to list the service instances",
            ResourceControllerError,
        )
        power_instance = find_power_instance(
            instances,
            instance_id=opts.instance_id,
            instance_name=opts.instance_name,
        )

        location = self.locate_bucket(instances, opts.bucket, opts.region)
        self.verify_object(location.storage, opts.bucket, opts.object_name)

        if opts.has_hmac_keys:
            keys = HmacKeys(access_key_id=opts.access_key, secret_access_key=opts.secret_key)
        else:
            keys = self.resolve_hmac_keys(location.instance, opts.service_credential_name)

        request = ImageImportRequest(
            image_name=opts.image_name,
            object_name=opts.object_name,
            region=opts.region,
            access_key=keys.access_key_id,
            secret_key=keys.secret_access_key,
            bucket_name=opts.bucket,
            os_type=opts.os_type,
            storage_type=opts.storage_type,
        )
        image = self.import_image(power_instance, request)
        logger.info(
            "Importing Image %s is currently in %s state, "
            "Please check the Progress in the IBM Cloud UI",
            image.name,
            image.state,
        )
        return image

    def locate_bucket(
        self,
        instances: Sequence[ResourceInstance],
        bucket: str,
        region: str,
    ) -> BucketLocation:
        """Return the first COS instance whose buckets include *bucket*.

        Instances whose client cannot be built, or whose bucket listing
        fails, are skipped.
        """
        for instance in object_storage_instances(instances):
            try:
                storage = self._storage_factory(instance, region)
                buckets = storage.list_buckets()
            except Exception as exc:
                logger.debug("Skipping COS instance %s: %s", instance.name, exc)
                continue
            if bucket in buckets:
                logger.info(
                    "%s bucket found in the %s[ID:%s] COS instance",
                    bucket,
                    instance.name,
                    instance.id,
                )
                return BucketLocation(instance=instance, storage=storage)

        raise BucketNotFoundError(
            f"failed to find the COS instance for the bucket mentioned: {bucket}",
            hint="Check the bucket name and that --region matches the bucket location.",
        )

    def verify_object(
        self,
        storage: ObjectStorageProvider,
        bucket: str,
        object_name: str,
    ) -> None:
        """Raise :class:`ObjectNotFoundError` unless *object_name* is in *bucket*."""
        exists = _guard(
            lambda: storage.object_exists(bucket, object_name),
            f"failed to check the object {object_name}",
            ObjectStorageError,
        )
        if not exists:
            raise ObjectNotFoundError(
                f"failed to find the object {object_name} in {bucket} bucket",
            )
        logger.info("%s object found in the %s bucket", object_name, bucket)

    def resolve_hmac_keys(
        self,
        instance: ResourceInstance,
        credential_name: str,
    ) -> HmacKeys:
        """Read HMAC keys from the named service credential, creating it if absent."""
        keys = _guard(
            lambda: self._resource_controller.list_resource_keys(credential_name),
            "failed to list the service credentials",
            ServiceCredentialError,
        )

        if not keys:
            logger.info(
                "Auto Generating the COS Service credential for importing "
                "the image with name: %s",
                credential_name,
            )
            credential = _guard(
                lambda: self._resource_controller.create_hmac_resource_key(
                    credential_name, instance.id,
                ),
                "failed to create the service credential",
                ServiceCredentialError,
            )
        else:
            logger.info("Reading the existing service credential: %s", credential_name)
            credential = _pick_credential(keys, instance)

        if credential.hmac_keys is None:
            raise ServiceCredentialError(
                f"service credential {credential.name} carries no cos_hmac_keys",
                hint="Recreate the credential with HMAC enabled or pass "
                "--accesskey and --secretkey.",
            )
        return credential.hmac_keys

    def import_image(
        self,
        power_instance: ResourceInstance,
        request: ImageImportRequest,
    ) -> Image:
        """Start the remote import job on *power_instance*."""
        provider = _guard(
            lambda: self._power_factory(power_instance),
            f"failed to create the PowerVS client for {power_instance.name}",
            ImageImportError,
        )
        return _guard(
            lambda: provider.import_image(request),
            f"failed to import the image {request.image_name}",
            ImageImportError,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _pick_credential(
    keys: Sequence[ServiceCredential],
    instance: ResourceInstance,
) -> ServiceCredential:
    """Prefer the credential bound to *instance*, else the first one."""
    for key in keys:
        if key.source_crn == instance.crn:
            return key
    logger.warning(
        "No service credential named %s belongs to %s, using %s",
        keys[0].name,
        instance.name,
        keys[0].id,
    )
    return keys[0]


def _guard(
    call: Callable[[], _T],
    context: str,
    error_class: type[PvsadmError],
) -> _T:
    """Run *call*, letting our errors through and wrapping anything else."""
    try:
        return call()
    except PvsadmError:
        raise
    except Exception as exc:
        raise error_class(f"{context}: {exc}") from exc
