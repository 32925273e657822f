# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Static web UI files served by the transport server.

The UI is a single-page app, so the server answers unknown paths with
``index.html`` and lets the client-side router deal with them.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from .config import cfg

log = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"


@dataclass(frozen=True)
class Asset:
    body: bytes
    content_type: str


class AssetStore:
    def __init__(self, root):
        self.root = Path(root).resolve()

    def _resolve(self, rel_path: str) -> Path | None:
        """Map a request path to a file under root. Prevents traversal."""
        rel_path = rel_path.lstrip("/")
        if not rel_path:
            rel_path = INDEX_DOCUMENT
        target = (self.root / rel_path).resolve()
        if not target.is_relative_to(self.root):
            log.debug("Rejected path outside asset root: %s", rel_path)
            return None
        return target if target.is_file() else None

    def get(self, rel_path: str) -> Asset | None:
        target = self._resolve(rel_path)
        if target is None:
            return None
        content_type, _ = mimetypes.guess_type(target.name)
        return Asset(target.read_bytes(), content_type or "application/octet-stream")

    def index(self) -> Asset | None:
        return self.get(INDEX_DOCUMENT)

    @classmethod
    def from_config(cls, static_dir: str | None = None) -> "AssetStore | None":
        static_dir = static_dir or cfg("server", "static_dir")
        if not static_dir:
            return None
        if not Path(static_dir).is_dir():
            log.warning("Static directory %s not found — web UI disabled", static_dir)
            return None
        log.info("Serving web UI from %s", static_dir)
        return cls(static_dir)
