"""
Request and response shapes for the multipart upload lifecycle
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Dict, List, Optional, Union

from r2multipart.models.common import (
    ListingPage,
    ObjectLocation,
    SSECustomerKey,
    UploadListingMarker,
)

MIN_PART_NUMBER = 1
MAX_PART_NUMBER = 10000
DEFAULT_MAX_PARTS = 1000
DEFAULT_MAX_UPLOADS = 1000

BytesLike = Union[bytes, bytearray, memoryview]
PathLike = Union[str, os.PathLike]


@dataclass
class UploadSession:
    """A server-tracked multipart upload, identified by its opaque upload id"""
    target: ObjectLocation
    upload_id: str
    initiated_at: datetime
    server_side_encryption: Optional[str] = None
    storage_class: Optional[str] = None
    owner: Optional[str] = None


@dataclass(frozen=True)
class CompletedPart:
    part_number: int
    etag: str


@dataclass
class Part:
    part_number: int
    etag: str
    size: int
    last_modified: Optional[datetime] = None


# Requests

@dataclass
class InitiateMultipartUploadRequest:
    target: ObjectLocation
    content_type: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    server_side_encryption: Optional[str] = None
    storage_class: Optional[str] = None
    cache_control: Optional[str] = None
    content_disposition: Optional[str] = None
    content_encoding: Optional[str] = None
    expires: Optional[datetime] = None
    sse_customer: Optional[SSECustomerKey] = None


@dataclass
class UploadPartRequest:
    """Uploads one part. Set exactly one of ``stream``, ``data`` or ``file_path``.

    A ``stream`` is borrowed for the duration of the call and never closed
    by the service; open and close it yourself::

        with open(path, "rb") as fh:
            await service.upload_part(UploadPartRequest(target, upload_id, 1, stream=fh))
    """
    target: ObjectLocation
    upload_id: str
    part_number: int
    stream: Optional[BinaryIO] = None
    data: Optional[BytesLike] = None
    file_path: Optional[PathLike] = None
    content_md5: Optional[str] = None
    sse_customer: Optional[SSECustomerKey] = None


@dataclass
class CompleteMultipartUploadRequest:
    target: ObjectLocation
    upload_id: str
    parts: List[CompletedPart] = field(default_factory=list)


@dataclass
class AbortMultipartUploadRequest:
    target: ObjectLocation
    upload_id: str
    expected_bucket_owner: Optional[str] = None


@dataclass
class ListPartsRequest:
    target: ObjectLocation
    upload_id: str
    max_parts: int = DEFAULT_MAX_PARTS
    part_number_marker: Optional[int] = None
    expected_bucket_owner: Optional[str] = None


@dataclass
class ListMultipartUploadsRequest:
    bucket_name: str
    prefix: Optional[str] = None
    delimiter: Optional[str] = None
    max_uploads: int = DEFAULT_MAX_UPLOADS
    key_marker: Optional[str] = None
    upload_id_marker: Optional[str] = None
    expected_bucket_owner: Optional[str] = None


# Responses

@dataclass
class UploadPartResponse:
    target: ObjectLocation
    upload_id: str
    part_number: int
    etag: str
    uploaded_at: datetime
    server_side_encryption: Optional[str] = None

    def as_completed_part(self) -> CompletedPart:
        return CompletedPart(part_number=self.part_number, etag=self.etag)


@dataclass
class CompleteMultipartUploadResponse:
    target: ObjectLocation
    completed_at: datetime
    etag: Optional[str] = None
    location: Optional[str] = None
    version_id: Optional[str] = None
    server_side_encryption: Optional[str] = None


@dataclass
class AbortMultipartUploadResponse:
    target: ObjectLocation
    upload_id: str
    aborted_at: datetime


@dataclass
class ListPartsResponse:
    target: ObjectLocation
    upload_id: str
    page: ListingPage[Part, int]
    max_parts: int
    storage_class: Optional[str] = None
    owner: Optional[str] = None

    @property
    def parts(self) -> List[Part]:
        return self.page.items

    @property
    def is_truncated(self) -> bool:
        return self.page.is_truncated

    @property
    def next_part_number_marker(self) -> Optional[int]:
        return self.page.next_marker


@dataclass
class ListMultipartUploadsResponse:
    bucket_name: str
    page: ListingPage[UploadSession, UploadListingMarker]
    max_uploads: int
    prefix: Optional[str] = None
    delimiter: Optional[str] = None
    common_prefixes: List[str] = field(default_factory=list)

    @property
    def uploads(self) -> List[UploadSession]:
        return self.page.items

    @property
    def is_truncated(self) -> bool:
        return self.page.is_truncated
