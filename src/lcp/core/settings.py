"""Runtime settings for the LC platform library and CLI.

Settings are read from ``LCP_``-prefixed environment variables and an
optional ``.env`` file. Only ambient concerns live here (logging, the local
data directory, orchestration policy knobs); the platform's own constants
such as the ``lc-platform`` managed-by marker are not configurable.

Examples:
    >>> from lcp.core.settings import LcpSettings
    >>> LcpSettings(rollback_order="forward").rollback_order
    <RollbackOrder.FORWARD: 'forward'>

Fields
──────
log_level            : structlog level for ``configure_logging``
log_json             : force JSON (True) or console (False) output; auto when unset
data_dir             : root directory of the local filesystem storage provider
rollback_order       : order in which successful dependency deployments are undone
default_content_type : content type sent with artifact uploads

Tags:
    settings, configuration, pydantic, environment, lcp-core
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RollbackOrder(str, Enum):
    """Order of compensating calls after a partial dependency deployment."""

    FORWARD = "forward"  # same order the dependencies were deployed
    REVERSE = "reverse"  # last deployed is undone first


class LcpSettings(BaseSettings):
    """Settings shared by the library, its adapters and the ``lcp`` CLI."""

    model_config = SettingsConfigDict(
        env_prefix="LCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Storage ──────────────────────────────────────────────────
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".lcp",
        description="Root directory for the local filesystem storage provider",
    )
    default_content_type: str = "application/octet-stream"

    # ── Orchestration ────────────────────────────────────────────
    rollback_order: RollbackOrder = RollbackOrder.REVERSE


@lru_cache(maxsize=1)
def get_settings() -> LcpSettings:
    """Process-wide settings instance (cached; call ``get_settings.cache_clear()`` in tests)."""
    return LcpSettings()


__all__ = ["RollbackOrder", "LcpSettings", "get_settings"]
