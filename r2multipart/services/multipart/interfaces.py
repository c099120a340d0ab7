from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from r2multipart.models.multipart import CompletedPart
from r2multipart.services.multipart.content import ContentSource


class StorageGateway(ABC):
    """Abstract S3-compatible endpoint holding all multipart upload state.

    Calls are blocking. Parameters beyond the positional ones use S3 API
    names (``ContentType``, ``SSECustomerKey``, ``ExpectedBucketOwner`` ...)
    and responses are boto3-shaped dictionaries. Backend failures surface as
    ``botocore.exceptions.ClientError`` carrying the backend error code.
    """

    @abstractmethod
    def initiate_multipart_upload(self, bucket: str, key: str, **options: Any) -> Dict[str, Any]:
        pass

    @abstractmethod
    def upload_part(self, bucket: str, key: str, upload_id: str, part_number: int,
                    source: ContentSource, **options: Any) -> Dict[str, Any]:
        pass

    @abstractmethod
    def complete_multipart_upload(self, bucket: str, key: str, upload_id: str,
                                  parts: List[CompletedPart]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def abort_multipart_upload(self, bucket: str, key: str, upload_id: str,
                               **options: Any) -> Dict[str, Any]:
        pass

    @abstractmethod
    def list_parts(self, bucket: str, key: str, upload_id: str, max_parts: int,
                   part_number_marker: Optional[int] = None, **options: Any) -> Dict[str, Any]:
        pass

    @abstractmethod
    def list_multipart_uploads(self, bucket: str, prefix: Optional[str] = None,
                               delimiter: Optional[str] = None, max_uploads: int = 1000,
                               key_marker: Optional[str] = None,
                               upload_id_marker: Optional[str] = None,
                               **options: Any) -> Dict[str, Any]:
        pass
