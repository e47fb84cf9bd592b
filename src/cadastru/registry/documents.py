"""File storage for scanned contract documents."""

from __future__ import annotations

import logging
from pathlib import Path

from cadastru.core.config import RegistryConfig

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF-"


class DocumentStorage:
    """Stores scanned PDF contracts under ``<documents_dir>/<uat_id>/``."""

    def __init__(self, config: RegistryConfig | None = None) -> None:
        self._config = config or RegistryConfig()
        self._root = Path(self._config.documents_dir)

    @property
    def root(self) -> Path:
        return self._root

    def check(self, content: bytes) -> None:
        """Raise ValueError unless ``content`` is an acceptable PDF."""
        if not content:
            raise ValueError("Vă rugăm să atașați contractul scanat (PDF).")
        if len(content) > self._config.max_document_bytes:
            raise ValueError(
                f"Document exceeds {self._config.max_document_bytes} bytes"
            )
        if not content.startswith(_PDF_MAGIC):
            raise ValueError("Contract document must be a PDF")

    def directory_for(self, uat_id: str) -> Path:
        """Directory holding the documents of a UAT, always inside the root.

        Raises:
            ValueError: ``uat_id`` is not a plain directory name.
        """
        if uat_id in ("", ".", "..") or "/" in uat_id or "\\" in uat_id or "\0" in uat_id:
            raise ValueError(f"Invalid UAT identifier {uat_id!r}")
        directory = self._root / uat_id
        if self._root.resolve() not in directory.resolve().parents:
            raise ValueError(f"Invalid UAT identifier {uat_id!r}")
        return directory

    def save(self, uat_id: str, contract_id: str, content: bytes) -> Path:
        self.check(content)
        directory = self.directory_for(uat_id)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{contract_id}.pdf"
        path.write_bytes(content)
        logger.debug("Stored contract document %s (%d bytes)", path, len(content))
        return path

    def load(self, path: str | Path) -> bytes:
        return Path(path).read_bytes()
