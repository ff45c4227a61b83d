"""imgstash — short-lived image sharing over a two-tier store."""

from imgstash.coordinator import RetrievalCoordinator
from imgstash.core import ImageStash
from imgstash.types import ImageRecord, LookupState, RetrievalOutcome

__version__ = "0.1.0"

__all__ = [
    "ImageStash",
    "RetrievalCoordinator",
    "ImageRecord",
    "LookupState",
    "RetrievalOutcome",
]
