r"""HTTP operation delivering a decoded image."""

from __future__ import annotations

__all__ = ["ImageRequestOperation"]

from io import BytesIO
from typing import ClassVar

from PIL import Image

from arequest.operation.http import HttpOperation


class ImageRequestOperation(HttpOperation):
    r"""HTTP operation for downloading images.

    By default the response must have one of the following content types:
    ``image/tiff``, ``image/jpeg``, ``image/gif``, ``image/png``,
    ``image/ico``, ``image/x-icon``, ``image/bmp``, ``image/x-bmp``,
    ``image/x-xbitmap`` or ``image/x-win-bitmap``. The body is decoded with
    Pillow and fully loaded, so the delivered image does not depend on the
    released response buffer.
    """

    DEFAULT_CONTENT_TYPES: ClassVar[tuple[str, ...]] = (
        "image/tiff",
        "image/jpeg",
        "image/gif",
        "image/png",
        "image/ico",
        "image/x-icon",
        "image/bmp",
        "image/x-bmp",
        "image/x-xbitmap",
        "image/x-win-bitmap",
    )

    def decode(self, content: bytes) -> Image.Image:
        image = Image.open(BytesIO(content))
        image.load()
        return image
