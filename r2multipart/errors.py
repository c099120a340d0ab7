"""
Error taxonomy for multipart upload operations.

Every failure surfaced by the service is an ``R2Error`` carrying one of a
closed set of ``ErrorKind`` values plus whatever bucket / key / upload id /
part number context was known when it happened. Gateway failures are
chained as ``__cause__``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    OUT_OF_RANGE = "out_of_range"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BACKEND = "backend"
    UNEXPECTED = "unexpected"


class R2Error(Exception):
    """Base class for all errors raised by r2multipart"""
    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self,
                 message: str,
                 *,
                 bucket_name: Optional[str] = None,
                 key: Optional[str] = None,
                 upload_id: Optional[str] = None,
                 part_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.bucket_name = bucket_name
        self.key = key
        self.upload_id = upload_id
        self.part_number = part_number

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidArgumentError(R2Error, ValueError):
    kind = ErrorKind.INVALID_ARGUMENT


class OutOfRangeError(R2Error, ValueError):
    kind = ErrorKind.OUT_OF_RANGE


class NotFoundError(R2Error):
    """The bucket or the upload session does not exist"""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, *, resource: str, **context):
        super().__init__(message, **context)
        self.resource = resource


class ConflictError(R2Error):
    """Completion parts do not match what the backend stored"""
    kind = ErrorKind.CONFLICT


class BackendError(R2Error):
    kind = ErrorKind.BACKEND

    def __init__(self, message: str, *, code: Optional[str] = None, **context):
        super().__init__(message, **context)
        self.code = code


class UnexpectedError(R2Error):
    kind = ErrorKind.UNEXPECTED
