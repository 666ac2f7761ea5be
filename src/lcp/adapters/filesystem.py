"""
Local filesystem storage provider.

Maps every storage path onto a file below a root directory
(``LcpSettings.data_dir`` by default)::

    {root}/lcp-acme-core-billing/app.config                     JSON record
    {root}/lcp-acme-core-billing/versions/1.0.0/appversion.config
    {root}/lcp-acme-core-billing/versions/1.0.0/artifact         raw bytes

Writes go to a temporary sibling first and are moved into place with
``os.replace``, so a reader never sees a half-written record or artifact.
Concurrency control is last-write-wins; there is no locking.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

from lcp.core.errors import StorageCode, StorageError
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result
from lcp.core.settings import get_settings
from lcp.core.timestamps import utc_now
from lcp.domain.models import ArtifactReference, ArtifactUploadMetadata

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


def _os_error(code: StorageCode, message: str, error: OSError, path: str) -> Err:
    if isinstance(error, PermissionError):
        code = StorageCode.PERMISSION_DENIED
    return Err(StorageError(code, f"{message}: {error}", cause=error).with_context(path=path))


class LocalFileStorageProvider:
    """:class:`~lcp.protocols.StorageProvider` backed by a local directory tree."""

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root is not None else get_settings().data_dir
        self.root.mkdir(parents=True, exist_ok=True)
        self._resolved_root = self.root.resolve()

    def _locate(self, path: str) -> Result[Path]:
        target = (self.root / path).resolve()
        if target != self._resolved_root and self._resolved_root not in target.parents:
            return Err(
                StorageError(StorageCode.PERMISSION_DENIED, f"Path escapes storage root: {path}")
                .with_context(path=path)
            )
        return Ok(target)

    def exists(self, path: str) -> bool:
        return self._locate(path).map(Path.is_file).unwrap_or(False)

    def read(self, path: str) -> Result[dict[str, Any]]:
        located = self._locate(path)
        if located.is_err():
            return located  # type: ignore[return-value]
        target = located.unwrap()
        if not target.is_file():
            return Err(StorageError(StorageCode.NOT_FOUND, f"No record at {path}").with_context(path=path))
        try:
            with target.open(encoding="utf-8") as f:
                return Ok(json.load(f))
        except OSError as e:
            return _os_error(StorageCode.READ_FAILED, "Could not read record", e, path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(
                StorageError(StorageCode.READ_FAILED, f"Record at {path} is not valid JSON", cause=e)
                .with_context(path=path)
            )

    def write(self, path: str, record: Mapping[str, Any]) -> Result[None]:
        located = self._locate(path)
        if located.is_err():
            return located  # type: ignore[return-value]
        target = located.unwrap()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(dict(record), f, indent=2, sort_keys=True)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            return _os_error(StorageCode.WRITE_FAILED, "Could not write record", e, path)
        except TypeError as e:
            return Err(
                StorageError(StorageCode.WRITE_FAILED, f"Record is not JSON-serializable: {e}", cause=e)
                .with_context(path=path)
            )
        logger.debug("storage.record_written", path=path)
        return Ok(None)

    def delete(self, path: str) -> Result[None]:
        located = self._locate(path)
        if located.is_err():
            return located  # type: ignore[return-value]
        target = located.unwrap()
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            return _os_error(StorageCode.DELETE_FAILED, "Could not delete record", e, path)
        return Ok(None)

    def upload_artifact(
        self, path: str, stream: BinaryIO, metadata: ArtifactUploadMetadata
    ) -> Result[ArtifactReference]:
        located = self._locate(path)
        if located.is_err():
            return located  # type: ignore[return-value]
        target = located.unwrap()

        digest = hashlib.sha256()
        size = 0
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    while chunk := stream.read(CHUNK_SIZE):
                        digest.update(chunk)
                        size += len(chunk)
                        f.write(chunk)
                if size != metadata.size:
                    Path(tmp_name).unlink(missing_ok=True)
                    return Err(
                        StorageError(
                            StorageCode.PARTIAL_UPLOAD,
                            f"Expected {metadata.size} bytes, received {size}",
                        ).with_context(path=path)
                    )
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            return _os_error(StorageCode.UPLOAD_FAILED, "Artifact upload failed", e, path)

        logger.info("storage.artifact_uploaded", path=path, size=size, content_type=metadata.content_type)
        return Ok(
            ArtifactReference(
                path=path,
                size=size,
                checksum=f"sha256:{digest.hexdigest()}",
                uploaded_at=utc_now(),
            )
        )

    def delete_artifact(self, path: str) -> Result[None]:
        return self.delete(path)


__all__ = ["LocalFileStorageProvider"]
