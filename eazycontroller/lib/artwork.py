# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Thumbnail encoding for the WebSocket feed.

Providers hand back raw image bytes in whatever format the OS stores.  This
module bounds their size and turns them into the base64 string clients put
straight into a data: URL.  CPU-bound — call it from a worker thread.
"""

import base64
import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

log = logging.getLogger(__name__)

MAX_THUMBNAIL_BYTES = 5_000_000   # refuse anything larger outright
MAX_ARTWORK_SIZE = 500 * 1024     # re-encode above this to keep frames small


def _compress(image_bytes: bytes) -> bytes | None:
    """Re-encode *image_bytes* as JPEG, dropping quality if still too large."""
    try:
        image = Image.open(BytesIO(image_bytes))
        if image.mode in ("RGBA", "LA", "P"):
            image = image.convert("RGB")

        buf = BytesIO()
        image.save(buf, "JPEG", quality=85)
        if buf.tell() > MAX_ARTWORK_SIZE:
            buf = BytesIO()
            image.save(buf, "JPEG", quality=60)
        return buf.getvalue()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        log.warning("Error processing thumbnail: %s", e)
        return None


def encode_thumbnail(raw: bytes | None) -> str | None:
    """Return base64 for *raw* artwork, or None if there is nothing usable."""
    if not raw:
        return None
    if len(raw) > MAX_THUMBNAIL_BYTES:
        log.debug("Thumbnail too large (%d bytes), skipped", len(raw))
        return None

    data = raw
    if len(raw) > MAX_ARTWORK_SIZE:
        data = _compress(raw) or raw
    return base64.b64encode(data).decode("ascii")
