"""Core image service — listing and purging images of one PowerVS instance."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from pvsadm.core.models import Image, PurgeResult
from pvsadm.core.protocols import PowerImageProvider
from pvsadm.core.purge_filter import select_purgeable
from pvsadm.exceptions import ImageDeleteError, PowerApiError, PvsadmError

logger = logging.getLogger(__name__)


class ImageService:
    """Stateless service over a :class:`PowerImageProvider`.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`PowerImageProvider` protocol.
    """

    def __init__(self, provider: PowerImageProvider) -> None:
        self._provider: PowerImageProvider = provider

    def list_images(self) -> list[Image]:
        """Return every image of the instance, sorted by name."""
        try:
            images = self._provider.list_images()
        except PvsadmError:
            raise
        except Exception as exc:
            raise PowerApiError(f"failed to get the list of images: {exc}") from exc
        return sorted(images, key=lambda image: image.name)

    def purgeable_images(
        self,
        *,
        before: timedelta = timedelta(0),
        since: timedelta = timedelta(0),
        expr: str = "",
        now: datetime | None = None,
    ) -> list[Image]:
        """Return the images selected by the purge filter."""
        current = now if now is not None else datetime.now(timezone.utc)
        return select_purgeable(
            self.list_images(),
            before=before,
            since=since,
            expr=expr,
            now=current,
        )

    def purge(
        self,
        images: Sequence[Image],
        *,
        ignore_errors: bool = False,
    ) -> PurgeResult:
        """Delete *images* one by one.

        The first failure raises :class:`ImageDeleteError` unless
        *ignore_errors* is set, in which case failures are collected.
        """
        result = PurgeResult()
        for image in images:
            logger.info("Deleting image %s [ID:%s]", image.name, image.image_id)
            try:
                self._provider.delete_image(image.image_id)
            except Exception as exc:
                if not ignore_errors:
                    raise ImageDeleteError(
                        f"failed to delete the image {image.name}: {exc}",
                        hint="Pass --ignore-errors to continue past failures.",
                    ) from exc
                logger.warning("Failed to delete image %s, ignoring: %s", image.name, exc)
                result.failed.append((image, exc))
                continue
            result.deleted.append(image)
        return result
