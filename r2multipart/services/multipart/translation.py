import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from botocore.exceptions import ClientError

from r2multipart.errors import (
    BackendError,
    ConflictError,
    NotFoundError,
    R2Error,
    UnexpectedError,
)
from r2multipart.models.common import ObjectLocation

logger = logging.getLogger(__name__)

CONFLICT_CODES = frozenset({"InvalidPart", "InvalidPartOrder"})


def error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "") or ""


def _describe(target: Optional[ObjectLocation], bucket_name: Optional[str]) -> str:
    if target is not None:
        return f"object '{target.key}' in bucket '{target.bucket_name}'"
    return f"bucket '{bucket_name}'"


def translate_error(exc: Exception,
                    operation: str,
                    *,
                    target: Optional[ObjectLocation] = None,
                    bucket_name: Optional[str] = None,
                    upload_id: Optional[str] = None,
                    part_number: Optional[int] = None) -> R2Error:
    """Map a gateway failure onto the domain error taxonomy.

    The returned error is meant to be raised ``from exc`` so the original
    failure stays attached as ``__cause__``.
    """
    if isinstance(exc, R2Error):
        return exc

    if target is not None:
        bucket_name = target.bucket_name
    context = dict(
        bucket_name=bucket_name,
        key=target.key if target is not None else None,
        upload_id=upload_id,
        part_number=part_number,
    )
    subject = _describe(target, bucket_name)

    if isinstance(exc, ClientError):
        code = error_code(exc)
        if code == "NoSuchBucket":
            return NotFoundError(f"Bucket '{bucket_name}' does not exist.",
                                 resource="bucket", **context)
        if code == "NoSuchUpload":
            return NotFoundError(f"Multipart upload '{upload_id}' does not exist for {subject}.",
                                 resource="upload", **context)
        if code in CONFLICT_CODES:
            return ConflictError(
                f"One or more parts are invalid for multipart upload '{upload_id}' of {subject}: {exc}",
                **context)
        return BackendError(f"Failed to {operation} for {subject}: {exc}", code=code or None, **context)

    return UnexpectedError(
        f"An unexpected error occurred while trying to {operation} for {subject}: {exc}", **context)


@contextmanager
def translating_errors(operation: str, **context) -> Iterator[None]:
    """Re-raise anything but cancellation as a translated ``R2Error``."""
    try:
        yield
    except R2Error:
        raise
    except Exception as exc:
        error = translate_error(exc, operation, **context)
        logger.warning("%s failed: %s", operation, error.message)
        raise error from exc
