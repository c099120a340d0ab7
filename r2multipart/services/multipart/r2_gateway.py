import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config

from r2multipart.config import R2Config, Settings, get_settings
from r2multipart.models.multipart import CompletedPart
from r2multipart.services.multipart.content import ContentSource
from r2multipart.services.multipart.interfaces import StorageGateway
from r2multipart.services.multipart.upload_service import MultipartUploadService

logger = logging.getLogger(__name__)


def _compact(**params: Any) -> Dict[str, Any]:
    """Drop unset parameters; boto3 rejects explicit ``None`` values."""
    return {name: value for name, value in params.items() if value is not None}


class R2Gateway(StorageGateway):
    """Cloudflare R2 storage gateway backed by a boto3 S3 client"""

    def __init__(self, client):
        self.boto_client = client

    @classmethod
    def from_config(cls, config: R2Config) -> "R2Gateway":
        client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            config=Config(
                region_name='auto',
                signature_version='s3v4',
                max_pool_connections=config.max_pool_connections,
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout,
                retries={'max_attempts': config.max_attempts, 'mode': 'standard'},
                # R2 rejects the default CRC trailers on streamed bodies
                request_checksum_calculation='when_required',
                response_checksum_validation='when_required',
            )
        )
        return cls(client)

    def initiate_multipart_upload(self, bucket: str, key: str, **options: Any) -> Dict[str, Any]:
        return self.boto_client.create_multipart_upload(Bucket=bucket, Key=key, **_compact(**options))

    def upload_part(self, bucket: str, key: str, upload_id: str, part_number: int,
                    source: ContentSource, **options: Any) -> Dict[str, Any]:
        with source.open() as body:
            return self.boto_client.upload_part(
                Bucket=bucket,
                Key=key,
                UploadId=upload_id,
                PartNumber=part_number,
                Body=body,
                **_compact(**options)
            )

    def complete_multipart_upload(self, bucket: str, key: str, upload_id: str,
                                  parts: List[CompletedPart]) -> Dict[str, Any]:
        return self.boto_client.complete_multipart_upload(
            Bucket=bucket,
            Key=key,
            UploadId=upload_id,
            MultipartUpload={
                'Parts': [{'PartNumber': part.part_number, 'ETag': part.etag} for part in parts]
            }
        )

    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str,
                               **options: Any) -> Dict[str, Any]:
        return self.boto_client.abort_multipart_upload(
            Bucket=bucket, Key=key, UploadId=upload_id, **_compact(**options)
        )

    def list_parts(self, bucket: str, key: str, upload_id: str, max_parts: int,
                   part_number_marker: Optional[int] = None, **options: Any) -> Dict[str, Any]:
        return self.boto_client.list_parts(
            Bucket=bucket,
            Key=key,
            UploadId=upload_id,
            MaxParts=max_parts,
            **_compact(PartNumberMarker=part_number_marker, **options)
        )

    def list_multipart_uploads(self, bucket: str, prefix: Optional[str] = None,
                               delimiter: Optional[str] = None, max_uploads: int = 1000,
                               key_marker: Optional[str] = None,
                               upload_id_marker: Optional[str] = None,
                               **options: Any) -> Dict[str, Any]:
        return self.boto_client.list_multipart_uploads(
            Bucket=bucket,
            MaxUploads=max_uploads,
            **_compact(
                Prefix=prefix,
                Delimiter=delimiter,
                KeyMarker=key_marker,
                UploadIdMarker=upload_id_marker,
                **options
            )
        )


class MultipartUploadServiceBuilder:
    """Constructs the service with its R2 gateway"""
    @staticmethod
    def build(settings: Optional[Settings] = None) -> MultipartUploadService:
        config = R2Config.from_settings(settings or get_settings())
        logger.debug("Building multipart upload service for %s", config.endpoint_url)
        return MultipartUploadService(R2Gateway.from_config(config))
