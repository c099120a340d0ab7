from .common import ListingPage, ObjectLocation, SSECustomerKey, UploadListingMarker
from .multipart import (
    DEFAULT_MAX_PARTS,
    DEFAULT_MAX_UPLOADS,
    MAX_PART_NUMBER,
    MIN_PART_NUMBER,
    AbortMultipartUploadRequest,
    AbortMultipartUploadResponse,
    CompletedPart,
    CompleteMultipartUploadRequest,
    CompleteMultipartUploadResponse,
    InitiateMultipartUploadRequest,
    ListMultipartUploadsRequest,
    ListMultipartUploadsResponse,
    ListPartsRequest,
    ListPartsResponse,
    Part,
    UploadPartRequest,
    UploadPartResponse,
    UploadSession,
)

__all__ = [
    'ListingPage',
    'ObjectLocation',
    'SSECustomerKey',
    'UploadListingMarker',
    'DEFAULT_MAX_PARTS',
    'DEFAULT_MAX_UPLOADS',
    'MAX_PART_NUMBER',
    'MIN_PART_NUMBER',
    'AbortMultipartUploadRequest',
    'AbortMultipartUploadResponse',
    'CompletedPart',
    'CompleteMultipartUploadRequest',
    'CompleteMultipartUploadResponse',
    'InitiateMultipartUploadRequest',
    'ListMultipartUploadsRequest',
    'ListMultipartUploadsResponse',
    'ListPartsRequest',
    'ListPartsResponse',
    'Part',
    'UploadPartRequest',
    'UploadPartResponse',
    'UploadSession',
]
