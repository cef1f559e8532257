"""Read access to the inventory snapshot written by the ingestion job."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from threading import RLock
from typing import Annotated

from fastapi import Depends
from pydantic import BaseModel, ConfigDict, Field

from src.config import settings
from src.models.product import Product

logger = logging.getLogger(__name__)


class EngineUnavailable(RuntimeError):
    """Raised when no catalog snapshot can be read."""


class CatalogSnapshot(BaseModel):
    """Immutable view of the catalog for the duration of one operation."""

    model_config = ConfigDict(frozen=True)

    products: tuple[Product, ...] = ()
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source_mtime: float | None = None

    def __len__(self) -> int:
        return len(self.products)


class CatalogProvider:
    """Holds the current snapshot reference and swaps it when the file changes.

    Readers never block on a reload: they get whichever snapshot reference was
    current when they asked.
    """

    def __init__(
        self,
        path: Path | None = None,
        products: Iterable[Product] | None = None,
    ) -> None:
        self._lock = RLock()
        self._path = path
        self._snapshot: CatalogSnapshot | None = None
        self._failed_mtime: float | None = None
        if products is not None:
            self._snapshot = CatalogSnapshot(products=tuple(products))

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def snapshot(self) -> CatalogSnapshot:
        """Return the current snapshot, re-reading the file when it changed."""
        if self._path is not None and self._is_stale():
            self.reload()
        current = self._snapshot
        if current is None:
            raise EngineUnavailable("Catalog snapshot is not available")
        return current

    def reload(self) -> CatalogSnapshot:
        """Read the snapshot file and atomically replace the current reference."""
        if self._path is None:
            current = self._snapshot
            if current is None:
                raise EngineUnavailable("No catalog source configured")
            return current

        with self._lock:
            try:
                snapshot = self._read(self._path)
            except EngineUnavailable:
                if self._snapshot is None:
                    raise
                # Not retried until the file changes again.
                self._failed_mtime = _mtime(self._path)
                logger.warning(
                    "Catalog reload failed, keeping previous snapshot",
                    extra={"path": str(self._path)},
                    exc_info=True,
                )
                return self._snapshot
            self._snapshot = snapshot
            self._failed_mtime = None

        logger.info(
            "Loaded catalog snapshot with %s products from %s",
            len(snapshot),
            self._path,
        )
        return snapshot

    def _is_stale(self) -> bool:
        current = self._snapshot
        if current is None:
            return True
        mtime = _mtime(self._path)
        if mtime is None:
            return False
        return mtime not in (current.source_mtime, self._failed_mtime)

    @staticmethod
    def _read(path: Path) -> CatalogSnapshot:
        try:
            mtime = path.stat().st_mtime
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise EngineUnavailable(f"Cannot read catalog at {path}: {exc}") from exc

        if not isinstance(raw, list):
            raise EngineUnavailable(f"Catalog at {path} is not a list of records")

        products = tuple(
            Product.from_record(record) for record in raw if isinstance(record, dict)
        )
        return CatalogSnapshot(products=products, source_mtime=mtime)


def _mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


_catalog = CatalogProvider(Path(settings.CATALOG_PATH))


def get_catalog() -> CatalogProvider:
    """FastAPI dependency factory."""

    return _catalog


CatalogDependency = Annotated[CatalogProvider, Depends(get_catalog)]
