"""
Pytest configuration for r2multipart tests
"""

import hashlib
import itertools
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from r2multipart.models import ObjectLocation
from r2multipart.services.multipart import MultipartUploadService, StorageGateway


def client_error(code, operation, message=None):
    return ClientError({'Error': {'Code': code, 'Message': message or code}}, operation)


class InMemoryStorageGateway(StorageGateway):
    """Thread-safe stand-in for an S3-compatible endpoint"""

    def __init__(self, buckets=("test-bucket",)):
        self.buckets = set(buckets)
        self.uploads = {}
        self.objects = {}
        self.calls = []
        self.options = {}
        self.fail_with = None
        self._lock = threading.Lock()
        self._sequence = itertools.count()

    def _record(self, name, **options):
        with self._lock:
            self.calls.append(name)
            self.options[name] = options
        if self.fail_with is not None:
            raise self.fail_with

    def _check_bucket(self, bucket, operation):
        if bucket not in self.buckets:
            raise client_error('NoSuchBucket', operation, 'The specified bucket does not exist')

    def _get_upload(self, bucket, key, upload_id, operation):
        self._check_bucket(bucket, operation)
        upload = self.uploads.get(upload_id)
        if upload is None or upload['bucket'] != bucket or upload['key'] != key:
            raise client_error('NoSuchUpload', operation, 'The specified upload does not exist')
        return upload

    def initiate_multipart_upload(self, bucket, key, **options):
        self._record('initiate_multipart_upload', **options)
        with self._lock:
            self._check_bucket(bucket, 'CreateMultipartUpload')
            upload_id = uuid.uuid4().hex
            self.uploads[upload_id] = {
                'bucket': bucket,
                'key': key,
                'initiated': datetime.now(timezone.utc),
                'sequence': next(self._sequence),
                'parts': {},
            }
        response = {'Bucket': bucket, 'Key': key, 'UploadId': upload_id}
        if options.get('ServerSideEncryption'):
            response['ServerSideEncryption'] = options['ServerSideEncryption']
        return response

    def upload_part(self, bucket, key, upload_id, part_number, source, **options):
        self._record('upload_part', **options)
        with source.open() as body:
            payload = body.read()
        etag = '"%s"' % hashlib.md5(payload).hexdigest()
        with self._lock:
            upload = self._get_upload(bucket, key, upload_id, 'UploadPart')
            upload['parts'][part_number] = {
                'ETag': etag,
                'Size': len(payload),
                'LastModified': datetime.now(timezone.utc),
                'Body': payload,
            }
        return {'ETag': etag}

    def complete_multipart_upload(self, bucket, key, upload_id, parts):
        self._record('complete_multipart_upload')
        with self._lock:
            upload = self._get_upload(bucket, key, upload_id, 'CompleteMultipartUpload')
            for part in parts:
                stored = upload['parts'].get(part.part_number)
                if stored is None or stored['ETag'] != part.etag:
                    raise client_error('InvalidPart', 'CompleteMultipartUpload',
                                       'One or more of the specified parts could not be found')
            body = b''.join(upload['parts'][part.part_number]['Body'] for part in parts)
            del self.uploads[upload_id]
            self.objects[(bucket, key)] = body
        etag = '"%s-%d"' % (hashlib.md5(body).hexdigest(), len(parts))
        return {
            'Location': f'https://{bucket}.example.com/{key}',
            'Bucket': bucket,
            'Key': key,
            'ETag': etag,
        }

    def abort_multipart_upload(self, bucket, key, upload_id, **options):
        self._record('abort_multipart_upload', **options)
        with self._lock:
            self._get_upload(bucket, key, upload_id, 'AbortMultipartUpload')
            del self.uploads[upload_id]
        return {}

    def list_parts(self, bucket, key, upload_id, max_parts, part_number_marker=None, **options):
        self._record('list_parts', **options)
        with self._lock:
            upload = self._get_upload(bucket, key, upload_id, 'ListParts')
            numbers = sorted(n for n in upload['parts'] if n > (part_number_marker or 0))
            page = numbers[:max_parts]
            parts = [
                {
                    'PartNumber': n,
                    'ETag': upload['parts'][n]['ETag'],
                    'Size': upload['parts'][n]['Size'],
                    'LastModified': upload['parts'][n]['LastModified'],
                }
                for n in page
            ]
        response = {
            'Bucket': bucket,
            'Key': key,
            'UploadId': upload_id,
            'MaxParts': max_parts,
            'IsTruncated': len(numbers) > max_parts,
            'Parts': parts,
            'StorageClass': 'STANDARD',
            'Owner': {'DisplayName': 'owner', 'ID': 'owner-id'},
        }
        if page:
            response['NextPartNumberMarker'] = page[-1]
        return response

    def list_multipart_uploads(self, bucket, prefix=None, delimiter=None, max_uploads=1000,
                               key_marker=None, upload_id_marker=None, **options):
        self._record('list_multipart_uploads', **options)
        with self._lock:
            self._check_bucket(bucket, 'ListMultipartUploads')
            uploads = sorted(
                (
                    (upload['key'], upload['sequence'], upload_id, upload)
                    for upload_id, upload in self.uploads.items()
                    if upload['bucket'] == bucket and upload['key'].startswith(prefix or '')
                ),
                key=lambda entry: (entry[0], entry[1]),
            )
        common_prefixes = []
        if delimiter:
            kept = []
            for entry in uploads:
                remainder = entry[0][len(prefix or ''):]
                if delimiter in remainder:
                    common = (prefix or '') + remainder.split(delimiter, 1)[0] + delimiter
                    if common not in common_prefixes:
                        common_prefixes.append(common)
                else:
                    kept.append(entry)
            uploads = kept
        if key_marker is not None:
            if upload_id_marker is not None:
                position = next((i for i, entry in enumerate(uploads)
                                 if entry[0] == key_marker and entry[2] == upload_id_marker), None)
                uploads = uploads[position + 1:] if position is not None else [
                    entry for entry in uploads if entry[0] > key_marker]
            else:
                uploads = [entry for entry in uploads if entry[0] > key_marker]

        page = uploads[:max_uploads]
        response = {
            'Bucket': bucket,
            'MaxUploads': max_uploads,
            'IsTruncated': len(uploads) > max_uploads,
            'Uploads': [
                {
                    'Key': key,
                    'UploadId': upload_id,
                    'Initiated': upload['initiated'],
                    'StorageClass': 'STANDARD',
                    'Owner': {'DisplayName': 'owner', 'ID': 'owner-id'},
                }
                for key, _, upload_id, upload in page
            ],
        }
        if prefix is not None:
            response['Prefix'] = prefix
        if delimiter is not None:
            response['Delimiter'] = delimiter
        if common_prefixes:
            response['CommonPrefixes'] = [{'Prefix': common} for common in common_prefixes]
        if page:
            response['NextKeyMarker'] = page[-1][0]
            response['NextUploadIdMarker'] = page[-1][2]
        return response


@pytest.fixture
def gateway():
    return InMemoryStorageGateway()


@pytest.fixture
def service(gateway):
    return MultipartUploadService(gateway)


@pytest.fixture
def target():
    return ObjectLocation("test-bucket", "videos/large-file.mp4")


@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs"""
    with tempfile.TemporaryDirectory() as tmpdirname:
        yield Path(tmpdirname)
