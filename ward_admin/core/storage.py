"""
Attachment uploads to Appwrite Storage buckets.

Routes receive an ``UploadFile``, hand its bytes to a ``BucketUploader`` and
store the returned public URL on the record (``file_dinh_kem``, ``image``,
``file_quyet_dinh``).
"""
import secrets
import time

from appwrite.exception import AppwriteException
from appwrite.id import ID
from appwrite.input_file import InputFile
from appwrite.services.storage import Storage
from fastapi import HTTPException, UploadFile, status
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ward_admin.core import config
from ward_admin.core.appwrite import AppwriteClient
from ward_admin.utils import get_logger


log = get_logger(__name__)


class UploadResponse(BaseModel):
    """Public URL of an uploaded attachment."""
    url: str


def make_object_name(filename: str) -> str:
    """
    Build a collision-resistant object name that keeps the original extension.

    ``"Scan 01.PDF"`` becomes something like ``"1718000000000-k3j9x2a.PDF"``.
    """
    ext = filename.rsplit(".", 1)[-1] if "." in filename else ""
    stem = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"
    return f"{stem}.{ext}" if ext else stem


def public_url(bucket_id: str, file_id: str) -> str:
    """Public view URL for a stored file."""
    endpoint = (config.APPWRITE_ENDPOINT or "").rstrip("/")
    return f"{endpoint}/storage/buckets/{bucket_id}/files/{file_id}/view?project={config.APPWRITE_PROJECT_ID}"


class BucketUploader:
    """Uploads raw bytes into one Appwrite bucket."""

    def __init__(self, bucket_id: str):
        self.bucket_id = bucket_id

    def _create_file(self, object_name: str, content: bytes) -> str:
        storage = Storage(AppwriteClient.get_client())
        created = storage.create_file(
            self.bucket_id,
            ID.unique(),
            InputFile.from_bytes(content, filename=object_name),
        )
        return created["$id"]

    async def upload(self, filename: str, content: bytes) -> str:
        """
        Store ``content`` and return its public URL.

        Raises:
            HTTPException: 502 if the storage service rejects the upload
        """
        object_name = make_object_name(filename)
        try:
            file_id = await run_in_threadpool(self._create_file, object_name, content)
        except AppwriteException as e:
            log.error("Upload of %s to bucket %s failed: %s", filename, self.bucket_id, e)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="File upload failed",
            )
        log.info("Uploaded %s to bucket %s as %s", filename, self.bucket_id, file_id)
        return public_url(self.bucket_id, file_id)


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded file fully, enforcing ``MAX_UPLOAD_BYTES``.

    Raises:
        HTTPException: 400 for an empty file, 413 when it is too large
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {config.MAX_UPLOAD_BYTES} bytes",
        )
    return content


def get_cong_van_storage() -> BucketUploader:
    return BucketUploader(config.CONG_VAN_BUCKET_ID)


def get_rewards_storage() -> BucketUploader:
    return BucketUploader(config.REWARDS_BUCKET_ID)
