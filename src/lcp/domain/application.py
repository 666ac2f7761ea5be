"""
Application aggregate root.

An Application is registered once per ``(account, team, moniker)``. Its id,
account, moniker and storage path never change; ``metadata`` and
``updated_at`` are the only mutable state and change only through
:meth:`Application.update`, which re-validates and refreshes the timestamp.

Construction goes through :meth:`Application.create` (new registration) or
:meth:`Application.from_record` (rehydration from storage). Both validate
and return a :class:`~lcp.core.result.Result`; calling the class directly
raises ``TypeError``.

Identity:
    Two Application objects are equal iff their ids are equal, regardless
    of metadata or timestamps.
"""

from __future__ import annotations

from datetime import datetime

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result, collect_results
from lcp.core.timestamps import advance, utc_now
from lcp.domain.identifiers import ApplicationId, TeamMoniker
from lcp.domain.models import ApplicationMetadata, ApplicationRecord
from lcp.domain.paths import StoragePath
from lcp.domain.rules import check_present_strings

_CONSTRUCT = object()


class Application:
    __slots__ = (
        "id",
        "account",
        "team_moniker",
        "storage_path",
        "_metadata",
        "created_at",
        "_updated_at",
    )

    def __init__(
        self,
        *,
        id: ApplicationId,
        account: str,
        team_moniker: TeamMoniker,
        storage_path: StoragePath,
        metadata: ApplicationMetadata | None,
        created_at: datetime,
        updated_at: datetime,
        _token: object = None,
    ):
        if _token is not _CONSTRUCT:
            raise TypeError("Use Application.create() or Application.from_record()")
        self.id = id
        self.account = account
        self.team_moniker = team_moniker
        self.storage_path = storage_path
        self._metadata = metadata
        self.created_at = created_at
        self._updated_at = updated_at

    @classmethod
    def create(
        cls,
        account: str,
        team_moniker: TeamMoniker,
        storage_path: StoragePath,
        metadata: ApplicationMetadata | None = None,
    ) -> Result[Application]:
        if not account:
            return Err(ValidationError(ValidationCode.MISSING_REQUIRED, "account is required", field="account"))

        checked = check_present_strings(metadata)
        if checked.is_err():
            return checked  # type: ignore[return-value]

        now = utc_now()
        return ApplicationId.generate().map(
            lambda app_id: cls(
                id=app_id,
                account=account,
                team_moniker=team_moniker,
                storage_path=storage_path,
                metadata=metadata,
                created_at=now,
                updated_at=now,
                _token=_CONSTRUCT,
            )
        )

    @classmethod
    def from_record(cls, record: ApplicationRecord) -> Result[Application]:
        """Rebuild an Application from its persisted record, re-validating every part."""
        parts = collect_results(
            [
                ApplicationId.parse(record.id),
                TeamMoniker.create(record.team, record.moniker),
                StoragePath.for_application(record.account, record.team, record.moniker),
                check_present_strings(record.metadata),
            ]
        )
        if parts.is_err():
            return parts  # type: ignore[return-value]
        app_id, team_moniker, storage_path, _ = parts.unwrap()

        return Ok(
            cls(
                id=app_id,
                account=record.account,
                team_moniker=team_moniker,
                storage_path=storage_path,
                metadata=record.metadata,
                created_at=record.created_at,
                updated_at=record.updated_at,
                _token=_CONSTRUCT,
            )
        )

    @property
    def metadata(self) -> ApplicationMetadata | None:
        return self._metadata

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def update(self, metadata: ApplicationMetadata) -> Result[None]:
        """Replace metadata and refresh ``updated_at``; state is untouched on failure."""
        checked = check_present_strings(metadata)
        if checked.is_err():
            return checked
        self._metadata = metadata
        self._updated_at = advance(self._updated_at)
        return Ok(None)

    def to_record(self) -> ApplicationRecord:
        return ApplicationRecord(
            id=str(self.id),
            account=self.account,
            team=self.team_moniker.team,
            moniker=self.team_moniker.moniker,
            metadata=self._metadata,
            created_at=self.created_at,
            updated_at=self._updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Application):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Application(id={self.id.value!r}, account={self.account!r}, moniker={str(self.team_moniker)!r})"


__all__ = ["Application"]
