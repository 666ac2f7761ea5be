"""Tests for lcp.adapters.memory module."""

import hashlib
import io

from lcp.adapters.memory import InMemoryStorageProvider
from lcp.core.errors import StorageCode
from lcp.domain.models import ArtifactUploadMetadata
from lcp.protocols import StorageProvider


class TestRecords:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStorageProvider(), StorageProvider)

    def test_write_read_delete(self):
        storage = InMemoryStorageProvider()
        storage.write("a/b", {"x": 1}).unwrap()
        assert storage.exists("a/b")
        assert storage.read("a/b").unwrap() == {"x": 1}
        storage.delete("a/b").unwrap()
        assert not storage.exists("a/b")

    def test_missing_read_is_not_found(self):
        result = InMemoryStorageProvider().read("nope")
        assert result.error.code is StorageCode.NOT_FOUND
        assert result.error.context.path == "nope"

    def test_records_are_isolated_copies(self):
        storage = InMemoryStorageProvider()
        record = {"nested": {"x": 1}}
        storage.write("p", record)
        record["nested"]["x"] = 2
        storage.read("p").unwrap()["nested"]["x"] = 3
        assert storage.read("p").unwrap() == {"nested": {"x": 1}}

    def test_delete_is_idempotent(self):
        assert InMemoryStorageProvider().delete("never-written").is_ok()


class TestArtifacts:
    def test_upload(self):
        storage = InMemoryStorageProvider()
        data = b"artifact-bytes"
        ref = storage.upload_artifact("p/artifact", io.BytesIO(data), ArtifactUploadMetadata(size=len(data))).unwrap()
        assert ref.path == "p/artifact"
        assert ref.size == len(data)
        assert ref.checksum == f"sha256:{hashlib.sha256(data).hexdigest()}"
        assert storage.artifact_bytes("p/artifact") == data

    def test_size_mismatch_is_partial_upload(self):
        storage = InMemoryStorageProvider()
        result = storage.upload_artifact("p/artifact", io.BytesIO(b"abc"), ArtifactUploadMetadata(size=10))
        assert result.error.code is StorageCode.PARTIAL_UPLOAD
        assert storage.artifact_bytes("p/artifact") is None

    def test_delete_artifact(self):
        storage = InMemoryStorageProvider()
        storage.upload_artifact("p/artifact", io.BytesIO(b"abc"), ArtifactUploadMetadata(size=3))
        storage.delete_artifact("p/artifact").unwrap()
        assert storage.artifact_bytes("p/artifact") is None
