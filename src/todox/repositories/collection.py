"""Repository that routes collection access to open surfaces or disk."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from .protocol import LineStoreProtocol, SurfaceProtocol

logger = logging.getLogger(__name__)

SurfaceLookup = Callable[[Path], "SurfaceProtocol | None"]


class CollectionRepository:
    """
    Access to todo collections with the "open surface first" policy.

    If a collection is open in a surface, reads and writes go through the
    surface; otherwise they go straight to the line store.
    """

    def __init__(
        self,
        store: LineStoreProtocol,
        surface_lookup: SurfaceLookup | None = None,
    ) -> None:
        """
        Initialize repository.

        Args:
            store: Disk storage for collections that are not open
            surface_lookup: Returns the open surface for a path, if any
        """
        self.store = store
        self._surface_lookup = surface_lookup

    def surface_for(self, path: Path) -> SurfaceProtocol | None:
        """Get the open surface for a collection, if any."""
        if self._surface_lookup is None:
            return None
        return self._surface_lookup(path)

    def is_open(self, path: Path) -> bool:
        return self.surface_for(path) is not None

    def load(self, path: Path) -> list[str]:
        """Load a collection from its surface if open, else from disk."""
        surface = self.surface_for(path)
        if surface is not None:
            logger.debug("Loading %s from open surface", path)
            return list(surface.get_lines())
        return self.store.read_lines(path)

    def store_lines(self, path: Path, lines: Sequence[str], *, persist: bool = False) -> None:
        """
        Write a collection.

        An open surface is updated in memory and only saved when ``persist``
        is set; otherwise the store writes the file directly.
        """
        surface = self.surface_for(path)
        if surface is None:
            self.store.write_lines(path, lines)
            return

        surface.set_lines(lines)
        if persist:
            surface.save()
            logger.debug("Saved open surface for %s", path)
