"""photogallery: random image acquisition, local persistence and ordering."""

__version__ = "0.1.0"

from photogallery.types import ImageRecord, OrderingRequest, SortKey, SortState

__all__ = ["ImageRecord", "OrderingRequest", "SortKey", "SortState", "__version__"]
