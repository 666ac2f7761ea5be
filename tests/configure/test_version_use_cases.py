"""Tests for lcp.configure.versions module."""

import io
import json

import pytest

from lcp.adapters import InMemoryStorageProvider
from lcp.configure import (
    ApplicationConfigurator,
    CacheArtifactRequest,
    InitApplicationRequest,
    InitVersionRequest,
    UpdateVersionRequest,
    VersionConfigurator,
    VersionIdentifier,
    dependency_failures,
)
from lcp.core.errors import ConfigurationCode, StorageCode, StorageError, ValidationCode
from lcp.core.result import Err, Ok
from lcp.domain.models import ArtifactUploadMetadata, DependencyConfiguration, VersionMetadata

VERSION_PATH = "lcp-acme-core-billing/versions/1.0.0/appversion.config"
ARTIFACT_PATH = "lcp-acme-core-billing/versions/1.0.0/artifact"


def _cache_request(identifier: VersionIdentifier, data: bytes = b"build-output") -> CacheArtifactRequest:
    return CacheArtifactRequest(identifier, io.BytesIO(data), ArtifactUploadMetadata(size=len(data)))


class FlakyStorage(InMemoryStorageProvider):
    """In-memory storage with switchable upload and write failures."""

    def __init__(self):
        super().__init__()
        self.fail_upload = False
        self.raise_on_upload = False
        self.fail_writes_to: str | None = None
        self.deleted_artifacts: list[str] = []

    def upload_artifact(self, path, stream, metadata):
        if self.raise_on_upload:
            raise ConnectionError("storage endpoint unreachable")
        if self.fail_upload:
            return Err(StorageError(StorageCode.UPLOAD_FAILED, "upload rejected"))
        return super().upload_artifact(path, stream, metadata)

    def write(self, path, record):
        if path == self.fail_writes_to:
            return Err(StorageError(StorageCode.WRITE_FAILED, "disk full"))
        return super().write(path, record)

    def delete_artifact(self, path):
        self.deleted_artifacts.append(path)
        return super().delete_artifact(path)


@pytest.fixture
def flaky() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture
def flaky_versions(flaky, policy, app_identifier, version_identifier, dependencies):
    ApplicationConfigurator(flaky).init(InitApplicationRequest(app_identifier)).unwrap()
    versions = VersionConfigurator(flaky, policy)
    versions.init(InitVersionRequest(version_identifier, dependencies=dependencies)).unwrap()
    return versions


class TestInitVersion:
    def test_stores_record(self, versions, storage, seeded_application, version_identifier, dependencies):
        version = versions.init(
            InitVersionRequest(version_identifier, dependencies, VersionMetadata(commit_sha="abc123"))
        ).unwrap()
        stored = storage.read(VERSION_PATH).unwrap()
        assert stored["applicationId"] == str(seeded_application.id)
        assert stored["versionNumber"] == "1.0.0"
        assert [dep["name"] for dep in stored["dependencies"]] == ["postgres", "rabbitmq"]
        assert stored["metadata"] == {"commitSha": "abc123"}
        assert version.artifact_reference is None

    def test_requires_application(self, versions, version_identifier):
        result = versions.init(InitVersionRequest(version_identifier))
        assert result.error.code is ConfigurationCode.NOT_FOUND

    def test_duplicate(self, versions, seeded_version, version_identifier):
        result = versions.init(InitVersionRequest(version_identifier))
        assert result.error.code is ConfigurationCode.ALREADY_EXISTS

    @pytest.mark.parametrize("number", ["1.0", "v1.0.0", "latest"])
    def test_invalid_version_number(self, versions, seeded_application, number):
        result = versions.init(InitVersionRequest(VersionIdentifier("acme", "core", "billing", number)))
        assert result.error.code is ConfigurationCode.VALIDATION_FAILED

    def test_prerelease_version(self, versions, seeded_application):
        ident = VersionIdentifier("acme", "core", "billing", "2.0.0-rc1")
        assert str(versions.init(InitVersionRequest(ident)).unwrap().version_number) == "2.0.0-rc1"

    def test_blank_dependency_rejected(self, versions, seeded_application, version_identifier):
        deps = [DependencyConfiguration(type="database", name=" ")]
        result = versions.init(InitVersionRequest(version_identifier, deps))
        assert result.error.code is ConfigurationCode.VALIDATION_FAILED


class TestReadUpdateDelete:
    def test_read(self, versions, seeded_version, version_identifier, dependencies):
        loaded = versions.read(version_identifier).unwrap()
        assert loaded == seeded_version
        assert loaded.dependencies == dependencies
        assert loaded.storage_path.version_config_path == VERSION_PATH

    def test_read_missing(self, versions, seeded_application, version_identifier):
        assert versions.read(version_identifier).error.code is ConfigurationCode.NOT_FOUND

    def test_update_dependencies_only(self, versions, seeded_version, version_identifier):
        versions.update(
            UpdateVersionRequest(version_identifier, metadata=VersionMetadata(release_notes="Initial"))
        ).unwrap()
        replacement = [DependencyConfiguration(type="cache", name="redis")]
        versions.update(UpdateVersionRequest(version_identifier, dependencies=replacement)).unwrap()

        loaded = versions.read(version_identifier).unwrap()
        assert loaded.dependencies == replacement
        assert loaded.metadata.release_notes == "Initial"

    def test_update_clears_dependencies(self, versions, seeded_version, version_identifier):
        versions.update(UpdateVersionRequest(version_identifier, dependencies=[])).unwrap()
        assert versions.read(version_identifier).unwrap().dependencies == []

    def test_delete(self, versions, storage, seeded_version, version_identifier):
        versions.delete(version_identifier).unwrap()
        assert not storage.exists(VERSION_PATH)
        assert versions.delete(version_identifier).error.code is ConfigurationCode.NOT_FOUND


class TestCacheArtifact:
    def test_cache(self, versions, storage, seeded_version, version_identifier):
        reference = versions.cache(_cache_request(version_identifier)).unwrap()
        assert reference.path == ARTIFACT_PATH
        assert reference.size == len(b"build-output")
        assert storage.artifact_bytes(ARTIFACT_PATH) == b"build-output"
        assert versions.read(version_identifier).unwrap().artifact_reference == reference

    def test_second_cache_keeps_first_reference(self, versions, storage, seeded_version, version_identifier):
        first = versions.cache(_cache_request(version_identifier, b"first")).unwrap()
        second = versions.cache(_cache_request(version_identifier, b"second"))

        assert second.error.code is ConfigurationCode.ALREADY_EXISTS
        assert versions.read(version_identifier).unwrap().artifact_reference == first
        assert storage.artifact_bytes(ARTIFACT_PATH) == b"first"

    def test_missing_version(self, versions, seeded_application, version_identifier):
        assert versions.cache(_cache_request(version_identifier)).error.code is ConfigurationCode.NOT_FOUND

    def test_upload_failure_cleans_up(self, flaky, flaky_versions, version_identifier):
        flaky.fail_upload = True
        result = flaky_versions.cache(_cache_request(version_identifier))

        assert result.error.code is StorageCode.UPLOAD_FAILED
        assert flaky.deleted_artifacts == [ARTIFACT_PATH]
        assert flaky_versions.read(version_identifier).unwrap().artifact_reference is None

    def test_raising_upload_is_an_error(self, flaky, flaky_versions, version_identifier):
        flaky.raise_on_upload = True
        result = flaky_versions.cache(_cache_request(version_identifier))

        assert isinstance(result.error, ConnectionError)
        assert flaky.deleted_artifacts == [ARTIFACT_PATH]

    def test_persist_failure_removes_artifact(self, flaky, flaky_versions, version_identifier):
        flaky.fail_writes_to = VERSION_PATH
        result = flaky_versions.cache(_cache_request(version_identifier))

        assert result.error.code is ConfigurationCode.STORAGE_ERROR
        assert flaky.artifact_bytes(ARTIFACT_PATH) is None
        assert flaky_versions.read(version_identifier).unwrap().artifact_reference is None


class TestPolicies:
    def test_generate_app_policy(self, versions, seeded_version, version_identifier):
        document = versions.generate_app_policy(version_identifier).unwrap()
        assert [s.resources for s in document.statements] == [
            ["arn:*:database:*:*:postgres"],
            ["arn:*:queue:*:*:rabbitmq"],
        ]

    def test_generate_cicd_policy(self, versions, seeded_version, version_identifier):
        document = versions.generate_cicd_policy(version_identifier).unwrap()
        assert document.statements[1].actions == ["queue:Create", "queue:Update", "queue:Delete"]

    def test_generate_for_missing_version(self, versions, version_identifier):
        assert versions.generate_app_policy(version_identifier).error.code is ConfigurationCode.NOT_FOUND

    def test_provider_failure_is_validation_failed(self, storage, seeded_version, version_identifier):
        class BrokenPolicy:
            def generate_app_policy(self, dependencies):
                raise RuntimeError("policy service down")

            def generate_cicd_policy(self, dependencies):
                return Ok(None)

            def serialize_policy(self, policy):
                return ""

        result = VersionConfigurator(storage, BrokenPolicy()).generate_app_policy(version_identifier)
        assert result.error.code is ConfigurationCode.VALIDATION_FAILED

    def test_publish(self, versions, storage, seeded_version, version_identifier):
        references = versions.publish_policies(version_identifier).unwrap()

        assert references.app_policy_path == "lcp-acme-core-billing/versions/1.0.0/policies/app-policy.json"
        assert references.cicd_policy_path == "lcp-acme-core-billing/versions/1.0.0/policies/cicd-policy.json"
        stored = json.loads(storage.read(references.app_policy_path).unwrap()["document"])
        assert stored["statements"][0]["actions"] == ["database:*"]
        assert versions.read(version_identifier).unwrap().policy_references == references


class TestDependencyValidation:
    def test_clean_list(self, versions, seeded_version, version_identifier):
        assert versions.validate_dependencies(version_identifier).unwrap().valid

    def test_reports_every_problem(self, versions, storage, seeded_version, version_identifier):
        raw = storage.read(VERSION_PATH).unwrap()
        raw["dependencies"] = [
            {"type": "database", "name": "postgres"},
            {"type": "queue", "name": "rabbit mq"},
            {"type": "database", "name": "postgres"},
        ]
        storage.write(VERSION_PATH, raw)

        report = versions.validate_dependencies(version_identifier).unwrap()
        assert not report.valid
        assert [f.field for f in report.failures] == ["dependencies[1].name", "dependencies[2]"]
        assert {f.code for f in report.failures} == {ValidationCode.DEPENDENCY_INVALID.value}

    def test_malformed_record(self, versions, storage, seeded_version, version_identifier):
        storage.write(VERSION_PATH, {"dependencies": "nope"})
        result = versions.validate_dependencies(version_identifier)
        assert result.error.code is ConfigurationCode.INVALID_FORMAT

    def test_dependency_failures_blank_fields(self):
        failures = dependency_failures([DependencyConfiguration(type="", name="ok")])
        assert [f.field for f in failures] == ["dependencies[0].type"]
