"""
Structural checks run before any request reaches the storage gateway.

All validators are pure and raise ``InvalidArgumentError`` or
``OutOfRangeError``; they never touch the network.
"""

from typing import Optional

from r2multipart.errors import InvalidArgumentError, OutOfRangeError
from r2multipart.models.common import ObjectLocation
from r2multipart.models.multipart import (
    MAX_PART_NUMBER,
    MIN_PART_NUMBER,
    AbortMultipartUploadRequest,
    CompleteMultipartUploadRequest,
    InitiateMultipartUploadRequest,
    ListMultipartUploadsRequest,
    ListPartsRequest,
    UploadPartRequest,
)


def require_non_empty(value: Optional[str], name: str, **context) -> None:
    if value is None or not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{name} must be a non-empty string", **context)


def validate_location(target: Optional[ObjectLocation]) -> None:
    if target is None:
        raise InvalidArgumentError("target must be provided")
    require_non_empty(target.bucket_name, "bucket_name")
    require_non_empty(target.key, "key", bucket_name=target.bucket_name)


def validate_part_number(value: int, **context) -> None:
    if (isinstance(value, bool) or not isinstance(value, int)
            or not MIN_PART_NUMBER <= value <= MAX_PART_NUMBER):
        raise OutOfRangeError(
            f"Part number must be between {MIN_PART_NUMBER} and {MAX_PART_NUMBER}, "
            f"got {value!r}",
            **context,
        )


def _validate_page_size(value: int, name: str, **context) -> None:
    # larger values go through; the backend caps them
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}", **context)


def _session_context(target: ObjectLocation, upload_id: str) -> dict:
    return dict(bucket_name=target.bucket_name, key=target.key, upload_id=upload_id)


def _validate_session(target: ObjectLocation, upload_id: str) -> None:
    validate_location(target)
    require_non_empty(upload_id, "upload_id", bucket_name=target.bucket_name, key=target.key)


def validate_initiate(request: InitiateMultipartUploadRequest) -> None:
    validate_location(request.target)


def validate_upload_part(request: UploadPartRequest) -> None:
    _validate_session(request.target, request.upload_id)
    validate_part_number(request.part_number,
                         part_number=request.part_number,
                         **_session_context(request.target, request.upload_id))


def validate_complete(request: CompleteMultipartUploadRequest) -> None:
    validate_location(request.target)
    context = _session_context(request.target, request.upload_id)
    # empty part lists are rejected whatever the upload id looks like
    if not request.parts:
        raise InvalidArgumentError(
            "At least one part must be provided to complete the multipart upload.", **context)
    require_non_empty(request.upload_id, "upload_id",
                      bucket_name=request.target.bucket_name, key=request.target.key)
    for part in request.parts:
        validate_part_number(part.part_number, part_number=part.part_number, **context)
        require_non_empty(part.etag, "etag", part_number=part.part_number, **context)


def validate_abort(request: AbortMultipartUploadRequest) -> None:
    _validate_session(request.target, request.upload_id)


def validate_list_parts(request: ListPartsRequest) -> None:
    _validate_session(request.target, request.upload_id)
    context = _session_context(request.target, request.upload_id)
    _validate_page_size(request.max_parts, "max_parts", **context)
    marker = request.part_number_marker
    if marker is not None and (isinstance(marker, bool) or not isinstance(marker, int) or marker < 0):
        raise InvalidArgumentError(f"part_number_marker must be a non-negative integer, got {marker!r}",
                                   **context)


def validate_list_uploads(request: ListMultipartUploadsRequest) -> None:
    require_non_empty(request.bucket_name, "bucket_name")
    _validate_page_size(request.max_uploads, "max_uploads", bucket_name=request.bucket_name)
