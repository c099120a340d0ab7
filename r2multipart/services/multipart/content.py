import io
import os
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Iterator, Optional

from r2multipart.errors import InvalidArgumentError
from r2multipart.models.multipart import UploadPartRequest


class ContentKind(str, Enum):
    STREAM = "stream"
    BYTES = "bytes"
    FILE = "file"


@dataclass(frozen=True)
class ContentSource:
    """The single byte source backing one transmit call.

    ``owned`` is true only for streams created here (the BytesIO view over a
    byte buffer); those are the only ones ``release`` will close.
    """
    kind: ContentKind
    stream: Optional[BinaryIO] = None
    path: Optional[str] = None
    owned: bool = False

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """Yield a readable body; files are opened here, lazily, and closed on exit."""
        if self.kind is ContentKind.FILE:
            with open(self.path, "rb") as fh:
                yield fh
        else:
            yield self.stream

    def release(self) -> None:
        if self.owned and self.stream is not None:
            self.stream.close()


def resolve_content_source(request: UploadPartRequest) -> ContentSource:
    """Resolve the request payload to exactly one content source."""
    context = dict(
        bucket_name=request.target.bucket_name,
        key=request.target.key,
        upload_id=request.upload_id,
        part_number=request.part_number,
    )
    provided = [value for value in (request.stream, request.data, request.file_path)
                if value is not None]

    if not provided:
        raise InvalidArgumentError(
            "No content source provided. Set one of stream, data or file_path.", **context)
    if len(provided) > 1:
        raise InvalidArgumentError(
            "Ambiguous content source. Set only one of stream, data or file_path.", **context)

    if request.stream is not None:
        return ContentSource(ContentKind.STREAM, stream=request.stream)

    if request.data is not None:
        return ContentSource(ContentKind.BYTES, stream=io.BytesIO(bytes(request.data)), owned=True)

    path = os.fspath(request.file_path)
    if not path:
        raise InvalidArgumentError("file_path must not be empty", **context)
    return ContentSource(ContentKind.FILE, path=path)
