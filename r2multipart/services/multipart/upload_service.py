import asyncio
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from r2multipart.errors import BackendError
from r2multipart.models.common import ListingPage, ObjectLocation, SSECustomerKey, UploadListingMarker
from r2multipart.models.multipart import (
    AbortMultipartUploadRequest,
    AbortMultipartUploadResponse,
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
from r2multipart.services.multipart import validation
from r2multipart.services.multipart.content import resolve_content_source
from r2multipart.services.multipart.interfaces import StorageGateway
from r2multipart.services.multipart.translation import translating_errors

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sse_customer_params(sse: Optional[SSECustomerKey]) -> Dict[str, Any]:
    if sse is None:
        return {}
    return {
        'SSECustomerAlgorithm': sse.algorithm,
        'SSECustomerKey': sse.key,
        'SSECustomerKeyMD5': sse.key_md5,
    }


def _owner_name(payload: Dict[str, Any]) -> Optional[str]:
    owner = payload.get('Owner') or {}
    return owner.get('DisplayName')


class MultipartUploadService:
    """Orchestrates the multipart upload lifecycle over a storage gateway.

    The service keeps no state between calls: every session lives on the
    gateway and is addressed by its upload id. Each operation validates its
    request before suspending, runs the blocking gateway call in a worker
    thread and translates any failure into an ``R2Error``. Cancel an
    operation by cancelling the task awaiting it; the outcome of the
    interrupted gateway call is then unknown.
    """

    def __init__(self, gateway: StorageGateway):
        self.gateway = gateway

    async def initiate_multipart_upload(self, request: InitiateMultipartUploadRequest) -> UploadSession:
        validation.validate_initiate(request)
        target = request.target
        options = dict(
            ContentType=request.content_type,
            Metadata=dict(request.metadata) if request.metadata else None,
            ServerSideEncryption=request.server_side_encryption,
            StorageClass=request.storage_class,
            CacheControl=request.cache_control,
            ContentDisposition=request.content_disposition,
            ContentEncoding=request.content_encoding,
            Expires=request.expires,
            **_sse_customer_params(request.sse_customer),
        )

        with translating_errors("initiate multipart upload", target=target):
            response = await asyncio.to_thread(
                self.gateway.initiate_multipart_upload, target.bucket_name, target.key, **options
            )

        session = UploadSession(
            target=target,
            upload_id=response['UploadId'],
            initiated_at=_utcnow(),
            server_side_encryption=response.get('ServerSideEncryption'),
        )
        logger.info("Initiated multipart upload %s for %s", session.upload_id, target)
        return session

    async def upload_part(self, request: UploadPartRequest) -> UploadPartResponse:
        validation.validate_upload_part(request)
        source = resolve_content_source(request)
        target = request.target
        options = dict(ContentMD5=request.content_md5, **_sse_customer_params(request.sse_customer))

        # whichever side takes the claim first releases the source
        claim = threading.Lock()

        def transmit() -> Optional[Dict[str, Any]]:
            if not claim.acquire(blocking=False):
                return None
            try:
                return self.gateway.upload_part(
                    target.bucket_name,
                    target.key,
                    request.upload_id,
                    request.part_number,
                    source,
                    **options
                )
            finally:
                source.release()

        with translating_errors(f"upload part {request.part_number}", target=target,
                                upload_id=request.upload_id, part_number=request.part_number):
            try:
                response = await asyncio.to_thread(transmit)
            except BaseException:
                # a free claim means the worker never started
                if claim.acquire(blocking=False):
                    source.release()
                raise

        logger.debug("Uploaded part %d of %s (%s)", request.part_number, request.upload_id, target)
        return UploadPartResponse(
            target=target,
            upload_id=request.upload_id,
            part_number=request.part_number,
            etag=response['ETag'],
            uploaded_at=_utcnow(),
            server_side_encryption=response.get('ServerSideEncryption'),
        )

    async def complete_multipart_upload(self,
                                        request: CompleteMultipartUploadRequest) -> CompleteMultipartUploadResponse:
        validation.validate_complete(request)
        target = request.target

        with translating_errors("complete multipart upload", target=target, upload_id=request.upload_id):
            response = await asyncio.to_thread(
                self.gateway.complete_multipart_upload,
                target.bucket_name,
                target.key,
                request.upload_id,
                list(request.parts),
            )

        logger.info("Completed multipart upload %s for %s with %d parts",
                    request.upload_id, target, len(request.parts))
        return CompleteMultipartUploadResponse(
            target=target,
            completed_at=_utcnow(),
            etag=response.get('ETag'),
            location=response.get('Location'),
            version_id=response.get('VersionId'),
            server_side_encryption=response.get('ServerSideEncryption'),
        )

    async def abort_multipart_upload(self, request: AbortMultipartUploadRequest) -> AbortMultipartUploadResponse:
        validation.validate_abort(request)
        target = request.target

        with translating_errors(f"abort multipart upload '{request.upload_id}'", target=target,
                                upload_id=request.upload_id):
            await asyncio.to_thread(
                self.gateway.abort_multipart_upload,
                target.bucket_name,
                target.key,
                request.upload_id,
                ExpectedBucketOwner=request.expected_bucket_owner,
            )

        logger.info("Aborted multipart upload %s for %s", request.upload_id, target)
        return AbortMultipartUploadResponse(target=target, upload_id=request.upload_id, aborted_at=_utcnow())

    async def list_parts(self, request: ListPartsRequest) -> ListPartsResponse:
        validation.validate_list_parts(request)
        target = request.target

        with translating_errors(f"list parts of multipart upload '{request.upload_id}'", target=target,
                                upload_id=request.upload_id):
            response = await asyncio.to_thread(
                self.gateway.list_parts,
                target.bucket_name,
                target.key,
                request.upload_id,
                request.max_parts,
                request.part_number_marker,
                ExpectedBucketOwner=request.expected_bucket_owner,
            )

        parts = [
            Part(
                part_number=part['PartNumber'],
                etag=part['ETag'],
                size=part.get('Size', 0),
                last_modified=part.get('LastModified'),
            )
            for part in response.get('Parts', [])
        ]
        is_truncated = bool(response.get('IsTruncated'))
        page = ListingPage(
            items=parts,
            is_truncated=is_truncated,
            next_marker=response.get('NextPartNumberMarker') if is_truncated else None,
        )
        return ListPartsResponse(
            target=target,
            upload_id=request.upload_id,
            page=page,
            max_parts=response.get('MaxParts', request.max_parts),
            storage_class=response.get('StorageClass'),
            owner=_owner_name(response),
        )

    async def list_multipart_uploads(self, request: ListMultipartUploadsRequest) -> ListMultipartUploadsResponse:
        validation.validate_list_uploads(request)
        bucket_name = request.bucket_name

        with translating_errors("list multipart uploads", bucket_name=bucket_name):
            response = await asyncio.to_thread(
                self.gateway.list_multipart_uploads,
                bucket_name,
                request.prefix,
                request.delimiter,
                request.max_uploads,
                request.key_marker,
                request.upload_id_marker,
                ExpectedBucketOwner=request.expected_bucket_owner,
            )

        uploads = [
            UploadSession(
                target=ObjectLocation(bucket_name, upload['Key']),
                upload_id=upload['UploadId'],
                initiated_at=upload.get('Initiated'),
                storage_class=upload.get('StorageClass'),
                owner=_owner_name(upload),
            )
            for upload in response.get('Uploads', [])
        ]
        is_truncated = bool(response.get('IsTruncated'))
        next_marker = None
        if is_truncated:
            next_marker = UploadListingMarker(response.get('NextKeyMarker'), response.get('NextUploadIdMarker'))

        return ListMultipartUploadsResponse(
            bucket_name=bucket_name,
            page=ListingPage(items=uploads, is_truncated=is_truncated, next_marker=next_marker),
            max_uploads=response.get('MaxUploads', request.max_uploads),
            prefix=response.get('Prefix'),
            delimiter=response.get('Delimiter'),
            common_prefixes=[entry['Prefix'] for entry in response.get('CommonPrefixes', [])],
        )

    async def iter_parts(self, request: ListPartsRequest) -> AsyncIterator[Part]:
        """Yield every part of an upload, following continuation markers."""
        while True:
            response = await self.list_parts(request)
            for part in response.parts:
                yield part
            if not response.is_truncated:
                return
            if response.next_part_number_marker is None:
                raise BackendError("Truncated part listing returned no continuation marker",
                                   bucket_name=request.target.bucket_name, key=request.target.key,
                                   upload_id=request.upload_id)
            request = replace(request, part_number_marker=response.next_part_number_marker)

    async def iter_multipart_uploads(self, request: ListMultipartUploadsRequest) -> AsyncIterator[UploadSession]:
        """Yield every in-flight upload in a bucket, following continuation markers."""
        while True:
            response = await self.list_multipart_uploads(request)
            for upload in response.uploads:
                yield upload
            marker = response.page.next_marker
            if not response.is_truncated:
                return
            if marker is None or marker.key_marker is None:
                raise BackendError("Truncated upload listing returned no continuation marker",
                                   bucket_name=request.bucket_name)
            request = replace(request, key_marker=marker.key_marker, upload_id_marker=marker.upload_id_marker)
