"""Repository layer for data access."""

from .collection import CollectionRepository
from .filesystem import FilesystemLineStore
from .protocol import LineStoreProtocol, SurfaceProtocol

__all__ = [
    "CollectionRepository",
    "FilesystemLineStore",
    "LineStoreProtocol",
    "SurfaceProtocol",
]
