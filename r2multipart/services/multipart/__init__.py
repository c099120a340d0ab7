"""
Multipart Upload Service Package

Drives the multipart upload lifecycle (initiate, upload part, complete,
abort, list parts, list uploads) against an S3-compatible storage gateway.

Key Components:
- StorageGateway: Abstract base class for the remote endpoint
- R2Gateway: Cloudflare R2 implementation over boto3
- MultipartUploadService: Main orchestration service
- MultipartUploadServiceBuilder: Dependency injection helper
- resolve_content_source / validation / translate_error: request checks and error mapping
"""

from .content import ContentKind, ContentSource, resolve_content_source
from .interfaces import StorageGateway
from .translation import translate_error, translating_errors
from .upload_service import MultipartUploadService
from .r2_gateway import MultipartUploadServiceBuilder, R2Gateway

__all__ = [
    # Interfaces
    'StorageGateway',

    # Implementations
    'R2Gateway',
    'ContentKind',
    'ContentSource',
    'resolve_content_source',
    'translate_error',
    'translating_errors',

    # Services
    'MultipartUploadService',
    'MultipartUploadServiceBuilder'
]
