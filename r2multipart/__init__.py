"""
r2multipart - multipart uploads for Cloudflare R2 and other S3-compatible storage
"""

from r2multipart.errors import (
    BackendError,
    ConflictError,
    ErrorKind,
    InvalidArgumentError,
    NotFoundError,
    OutOfRangeError,
    R2Error,
    UnexpectedError,
)
from r2multipart.models import *  # noqa: F401,F403
from r2multipart.models import __all__ as _models_all
from r2multipart.services.multipart import (
    MultipartUploadService,
    MultipartUploadServiceBuilder,
    R2Gateway,
    StorageGateway,
)

__version__ = "0.1.0"

__all__ = [
    'BackendError',
    'ConflictError',
    'ErrorKind',
    'InvalidArgumentError',
    'NotFoundError',
    'OutOfRangeError',
    'R2Error',
    'UnexpectedError',
    'MultipartUploadService',
    'MultipartUploadServiceBuilder',
    'R2Gateway',
    'StorageGateway',
    *_models_all,
]
