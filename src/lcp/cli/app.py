"""
Root Typer application for the lcp CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from lcp import __version__
from lcp.core.logging import LOG_LEVELS, configure_logging
from lcp.core.settings import get_settings

app = Typer(
    name="lcp",
    help="lcp — application, version and deployment configuration for the LC platform.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"lcp {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LCP_LOG_LEVEL.",
    ),
) -> None:
    """lcp CLI — register applications and versions, cache artifacts, deploy."""
    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(
            f"{level!r} is not one of {', '.join(LOG_LEVELS)}", param_hint="--log-level / LCP_LOG_LEVEL"
        )
    configure_logging(level=level, json_format=settings.log_json)


# ── Sub-command registration ─────────────────────────────────────────────

from lcp.cli.applications import app as applications_app  # noqa: E402
from lcp.cli.deploy import app as deploy_app  # noqa: E402
from lcp.cli.versions import app as versions_app  # noqa: E402

app.add_typer(applications_app, name="app", help="Application configuration.")
app.add_typer(versions_app, name="version", help="Version configuration, artifacts and policies.")
app.add_typer(deploy_app, name="deploy", help="Dependency and application deployment.")
