"""Tests for lcp.adapters.filesystem module."""

import hashlib
import io
import json

import pytest

from lcp.adapters.filesystem import LocalFileStorageProvider
from lcp.core.errors import StorageCode
from lcp.domain.models import ArtifactUploadMetadata
from lcp.protocols import StorageProvider


@pytest.fixture
def storage(tmp_path) -> LocalFileStorageProvider:
    return LocalFileStorageProvider(tmp_path / "store")


class TestRecords:
    def test_satisfies_protocol(self, storage):
        assert isinstance(storage, StorageProvider)

    def test_defaults_to_settings_data_dir(self, tmp_path):
        # LCP_DATA_DIR is set by the autouse fixture
        assert LocalFileStorageProvider().root == tmp_path / "lcp-data"

    def test_write_creates_json_file(self, storage):
        storage.write("lcp-acme-core-billing/app.config", {"id": "x", "account": "acme"}).unwrap()
        on_disk = storage.root / "lcp-acme-core-billing" / "app.config"
        assert json.loads(on_disk.read_text()) == {"account": "acme", "id": "x"}
        assert storage.read("lcp-acme-core-billing/app.config").unwrap() == {"id": "x", "account": "acme"}

    def test_no_temp_files_left(self, storage):
        storage.write("b/app.config", {"a": 1})
        storage.write("b/app.config", {"a": 2})
        assert [p.name for p in (storage.root / "b").iterdir()] == ["app.config"]

    def test_missing_read_is_not_found(self, storage):
        assert storage.read("b/app.config").error.code is StorageCode.NOT_FOUND
        assert storage.exists("b/app.config") is False

    def test_corrupt_json_is_read_failed(self, storage):
        (storage.root / "b").mkdir()
        (storage.root / "b" / "app.config").write_text("{not json")
        assert storage.read("b/app.config").error.code is StorageCode.READ_FAILED

    def test_non_utf8_record_is_read_failed(self, storage):
        (storage.root / "b").mkdir()
        (storage.root / "b" / "app.config").write_bytes(b"\xff\xfe{not utf8")
        assert storage.read("b/app.config").error.code is StorageCode.READ_FAILED

    def test_unserializable_record_is_write_failed(self, storage):
        assert storage.write("b/app.config", {"x": object()}).error.code is StorageCode.WRITE_FAILED

    def test_path_escape_is_denied(self, storage):
        result = storage.write("../outside.config", {"a": 1})
        assert result.error.code is StorageCode.PERMISSION_DENIED
        assert storage.exists("../outside.config") is False

    def test_delete(self, storage):
        storage.write("b/app.config", {"a": 1})
        storage.delete("b/app.config").unwrap()
        assert not storage.exists("b/app.config")
        assert storage.delete("b/app.config").is_ok()


class TestArtifacts:
    def test_upload_streams_and_checksums(self, storage):
        data = b"x" * 200_000
        ref = storage.upload_artifact("b/versions/1.0.0/artifact", io.BytesIO(data), ArtifactUploadMetadata(size=len(data)))
        ref = ref.unwrap()
        assert ref.size == len(data)
        assert ref.checksum == f"sha256:{hashlib.sha256(data).hexdigest()}"
        assert (storage.root / "b" / "versions" / "1.0.0" / "artifact").read_bytes() == data

    def test_partial_upload_leaves_nothing(self, storage):
        result = storage.upload_artifact("b/artifact", io.BytesIO(b"abc"), ArtifactUploadMetadata(size=4))
        assert result.error.code is StorageCode.PARTIAL_UPLOAD
        assert list((storage.root / "b").iterdir()) == []

    def test_delete_artifact(self, storage):
        storage.upload_artifact("b/artifact", io.BytesIO(b"abc"), ArtifactUploadMetadata(size=3))
        storage.delete_artifact("b/artifact").unwrap()
        assert not (storage.root / "b" / "artifact").exists()
