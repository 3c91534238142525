"""Tests for attachment uploads."""

import io

import pytest
from appwrite.exception import AppwriteException
from fastapi import HTTPException, UploadFile

from ward_admin.core import config, storage
from ward_admin.core.storage import BucketUploader, make_object_name, public_url, read_upload


class TestObjectNames:
    """Test cases for make_object_name and public_url."""

    def test_keeps_extension(self):
        name = make_object_name("Scan 01.PDF")
        assert name.endswith(".PDF")
        assert " " not in name

    def test_no_extension(self):
        assert "." not in make_object_name("README")

    def test_names_differ(self):
        assert make_object_name("a.pdf") != make_object_name("a.pdf")

    def test_public_url(self, monkeypatch):
        monkeypatch.setattr(config, "APPWRITE_ENDPOINT", "https://aw.test/v1/")
        monkeypatch.setattr(config, "APPWRITE_PROJECT_ID", "ward")
        assert public_url("ktkl", "f1") == "https://aw.test/v1/storage/buckets/ktkl/files/f1/view?project=ward"


class TestReadUpload:
    """Test cases for read_upload."""

    async def test_returns_content(self):
        upload = UploadFile(file=io.BytesIO(b"data"), filename="a.txt")
        assert await read_upload(upload) == b"data"

    async def test_too_large(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 3)
        upload = UploadFile(file=io.BytesIO(b"data"), filename="a.txt")
        with pytest.raises(HTTPException) as exc:
            await read_upload(upload)
        assert exc.value.status_code == 413


class TestBucketUploader:
    """Test cases for BucketUploader.upload."""

    async def test_returns_public_url(self, monkeypatch):
        monkeypatch.setattr(config, "APPWRITE_ENDPOINT", "https://aw.test/v1")
        monkeypatch.setattr(config, "APPWRITE_PROJECT_ID", "ward")
        calls = []

        def fake_create(self, object_name, content):
            calls.append((self.bucket_id, object_name, content))
            return "file-1"

        monkeypatch.setattr(BucketUploader, "_create_file", fake_create)

        url = await BucketUploader("cong_van_file").upload("scan.pdf", b"pdf")
        assert url == "https://aw.test/v1/storage/buckets/cong_van_file/files/file-1/view?project=ward"
        assert calls[0][0] == "cong_van_file"
        assert calls[0][1].endswith(".pdf")

    async def test_storage_failure_is_bad_gateway(self, monkeypatch):
        def failing_create(self, object_name, content):
            raise AppwriteException("bucket not found", 404)

        monkeypatch.setattr(BucketUploader, "_create_file", failing_create)

        with pytest.raises(HTTPException) as exc:
            await BucketUploader("missing").upload("scan.pdf", b"pdf")
        assert exc.value.status_code == 502

    def test_bucket_dependencies(self, monkeypatch):
        monkeypatch.setattr(config, "CONG_VAN_BUCKET_ID", "cv")
        monkeypatch.setattr(config, "REWARDS_BUCKET_ID", "kt")
        assert storage.get_cong_van_storage().bucket_id == "cv"
        assert storage.get_rewards_storage().bucket_id == "kt"
