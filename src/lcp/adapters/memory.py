"""
In-memory storage provider.

Keeps records and artifact bytes in process memory. Useful for tests,
examples and dry runs; nothing survives the process.

Records are deep-copied on the way in and out so callers can never mutate
stored state through a reference they still hold.
"""

from __future__ import annotations

import copy
import hashlib
from collections.abc import Mapping
from typing import Any, BinaryIO

from lcp.core.errors import StorageCode, StorageError
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result
from lcp.core.timestamps import utc_now
from lcp.domain.models import ArtifactReference, ArtifactUploadMetadata

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


def read_stream(stream: BinaryIO) -> tuple[bytes, str]:
    """Drain ``stream`` in chunks, returning the bytes and a ``sha256:`` checksum."""
    digest = hashlib.sha256()
    chunks: list[bytes] = []
    while chunk := stream.read(CHUNK_SIZE):
        digest.update(chunk)
        chunks.append(chunk)
    return b"".join(chunks), f"sha256:{digest.hexdigest()}"


class InMemoryStorageProvider:
    """Dict-backed :class:`~lcp.protocols.StorageProvider`."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._artifacts: dict[str, bytes] = {}

    def exists(self, path: str) -> bool:
        return path in self._records or path in self._artifacts

    def read(self, path: str) -> Result[dict[str, Any]]:
        if path not in self._records:
            return Err(StorageError(StorageCode.NOT_FOUND, f"No record at {path}").with_context(path=path))
        return Ok(copy.deepcopy(self._records[path]))

    def write(self, path: str, record: Mapping[str, Any]) -> Result[None]:
        self._records[path] = copy.deepcopy(dict(record))
        logger.debug("storage.record_written", path=path)
        return Ok(None)

    def delete(self, path: str) -> Result[None]:
        self._records.pop(path, None)
        return Ok(None)

    def upload_artifact(
        self, path: str, stream: BinaryIO, metadata: ArtifactUploadMetadata
    ) -> Result[ArtifactReference]:
        try:
            data, checksum = read_stream(stream)
        except OSError as e:
            return Err(
                StorageError(StorageCode.UPLOAD_FAILED, f"Could not read artifact stream: {e}", cause=e)
                .with_context(path=path)
            )
        if len(data) != metadata.size:
            return Err(
                StorageError(
                    StorageCode.PARTIAL_UPLOAD,
                    f"Expected {metadata.size} bytes, received {len(data)}",
                ).with_context(path=path)
            )

        self._artifacts[path] = data
        return Ok(ArtifactReference(path=path, size=len(data), checksum=checksum, uploaded_at=utc_now()))

    def delete_artifact(self, path: str) -> Result[None]:
        self._artifacts.pop(path, None)
        return Ok(None)

    def artifact_bytes(self, path: str) -> bytes | None:
        """Stored artifact content, for inspection."""
        return self._artifacts.get(path)


__all__ = ["InMemoryStorageProvider", "read_stream"]
