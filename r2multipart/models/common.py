from dataclasses import dataclass, field
from typing import Generic, List, NamedTuple, Optional, TypeVar

ItemT = TypeVar("ItemT")
MarkerT = TypeVar("MarkerT")


@dataclass(frozen=True)
class ObjectLocation:
    """Bucket and key addressing a single object"""
    bucket_name: str
    key: str

    def __str__(self) -> str:
        return f"{self.bucket_name}/{self.key}"


@dataclass(frozen=True)
class SSECustomerKey:
    """Customer-provided server-side encryption key (SSE-C)"""
    algorithm: str
    key: str
    key_md5: Optional[str] = None

    def __repr__(self) -> str:
        # keep key material out of logs and tracebacks
        return f"SSECustomerKey(algorithm={self.algorithm!r})"


class UploadListingMarker(NamedTuple):
    key_marker: Optional[str]
    upload_id_marker: Optional[str]


@dataclass
class ListingPage(Generic[ItemT, MarkerT]):
    """One page of a cursor-based listing.

    ``next_marker`` is only set when ``is_truncated`` is true; re-issue the
    listing with it until a page comes back untruncated.
    """
    items: List[ItemT] = field(default_factory=list)
    is_truncated: bool = False
    next_marker: Optional[MarkerT] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
