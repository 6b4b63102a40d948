"""
Single-flight wrapper around an external background-removal service.

The service itself (a segmentation model) lives outside the editor core. It
is any callable taking ``(buffer, quality)`` and returning a PixelBuffer with
transparency; it may be a coroutine function or a blocking function. Blocking
services run in a worker thread so the event loop, and the render pipeline,
stay responsive.

At most one removal runs at a time. A second request while one is pending
fails immediately with BackgroundRemovalBusyError; it is never queued and
never cancels the first.

Example:
    >>> remover = BackgroundRemover(my_segmentation_service, quality="medium")
    >>> cutout = await remover.remove(buffer)
"""

import asyncio
import inspect
import logging
from typing import Any, Callable

from PE_Libs.constants import (
    BACKGROUND_REMOVAL_QUALITIES,
    DEFAULT_BACKGROUND_REMOVAL_QUALITY,
)
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer

logger = logging.getLogger(__name__)

RemovalService = Callable[[PixelBuffer, str], Any]


class BackgroundRemovalError(RuntimeError):
    """The background-removal service failed or returned an unusable result."""


class BackgroundRemovalBusyError(RuntimeError):
    """A background removal is already in progress."""


def _validate_quality(quality: str) -> str:
    if quality not in BACKGROUND_REMOVAL_QUALITIES:
        raise ValueError(
            f"Unknown model quality: {quality}. "
            f"Valid qualities: {', '.join(BACKGROUND_REMOVAL_QUALITIES)}"
        )
    return quality


def _is_coroutine_service(service: RemovalService) -> bool:
    return inspect.iscoroutinefunction(service) or inspect.iscoroutinefunction(
        getattr(service, "__call__", None)
    )


class BackgroundRemover:
    """Serializes calls to a background-removal service."""

    def __init__(
        self,
        service: RemovalService,
        quality: str = DEFAULT_BACKGROUND_REMOVAL_QUALITY,
    ):
        if not callable(service):
            raise ValueError(f"service must be callable, got {type(service)}")
        self._service = service
        self.quality = _validate_quality(quality)
        self._is_processing = False

    @property
    def busy(self) -> bool:
        return self._is_processing

    def set_quality(self, quality: str) -> None:
        """Select the model size: 'small', 'medium' or 'large'."""
        self.quality = _validate_quality(quality)

    async def remove(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Remove the background from an image.

        The input buffer is passed to the service as a private copy.

        Returns:
            PixelBuffer with a transparent background

        Raises:
            BackgroundRemovalBusyError: If another removal is in flight
            BackgroundRemovalError: If the service fails or returns a non-buffer
        """
        require_buffer(buffer)

        if self._is_processing:
            logger.warning("Background removal requested while one is already running")
            raise BackgroundRemovalBusyError("Background removal already in progress")

        self._is_processing = True
        try:
            logger.info(f"Starting background removal ({self.quality} model)")
            try:
                if _is_coroutine_service(self._service):
                    result = await self._service(buffer.copy(), self.quality)
                else:
                    result = await asyncio.to_thread(self._service, buffer.copy(), self.quality)
            except Exception as e:
                logger.exception("Background removal failed")
                raise BackgroundRemovalError(f"Background removal failed: {str(e)}") from e

            if not isinstance(result, PixelBuffer):
                raise BackgroundRemovalError(
                    f"Background removal service returned {type(result)}, expected PixelBuffer"
                )

            logger.info("Background removal complete")
            return result
        finally:
            self._is_processing = False
