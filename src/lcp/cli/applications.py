"""
CLI: ``lcp app`` — application configuration commands.

Usage::

    lcp app init acme core billing --display-name "Billing" --owner core@acme.io
    lcp app show acme core billing --json
    lcp app update acme core billing --description "Invoices and payments"
    lcp app check acme core billing --since 2026-01-01T00:00:00Z
    lcp app delete acme core billing --yes
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer

from lcp.cli.utils import (
    console,
    data_dir_option,
    emit_json,
    json_option,
    open_storage,
    parse_pairs,
    print_fields,
    print_rows,
    unwrap_or_exit,
)
from lcp.configure import (
    ApplicationConfigurator,
    ApplicationIdentifier,
    InitApplicationRequest,
    UpdateApplicationRequest,
)
from lcp.core.timestamps import from_iso8601
from lcp.domain.application import Application
from lcp.domain.models import ApplicationMetadata

app = typer.Typer(no_args_is_help=True)


def _metadata(
    display_name: str | None,
    description: str | None,
    owner: str | None,
    tags: list[str],
) -> ApplicationMetadata | None:
    parsed_tags = parse_pairs(tags, "--tag") or None
    if not any((display_name, description, owner, parsed_tags)):
        return None
    return ApplicationMetadata(display_name=display_name, description=description, owner=owner, tags=parsed_tags)


def _show(application: Application, as_json: bool, title: str) -> None:
    record = application.to_record()
    if as_json:
        emit_json(record)
    else:
        print_fields(record.to_storage(), title=title)


@app.command("init")
def init_application(
    account: str = typer.Argument(..., help="Account (tenant) the application belongs to."),
    team: str = typer.Argument(..., help="Owning team."),
    moniker: str = typer.Argument(..., help="Short application name, unique within the team."),
    display_name: str | None = typer.Option(None, "--display-name", help="Human-friendly name."),
    description: str | None = typer.Option(None, "--description", help="Free-text description."),
    owner: str | None = typer.Option(None, "--owner", help="Owner contact."),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Metadata tag KEY=VALUE. Repeatable."),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Register a new application."""
    configurator = ApplicationConfigurator(open_storage(data_dir))
    request = InitApplicationRequest(
        identifier=ApplicationIdentifier(account, team, moniker),
        metadata=_metadata(display_name, description, owner, tag),
    )
    application = unwrap_or_exit(configurator.init(request))
    _show(application, json_out, title=f"Initialized {account}/{team}/{moniker}")


@app.command("show")
def show_application(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Show a stored application."""
    configurator = ApplicationConfigurator(open_storage(data_dir))
    application = unwrap_or_exit(configurator.read(ApplicationIdentifier(account, team, moniker)))
    _show(application, json_out, title=f"{account}/{team}/{moniker}")


@app.command("update")
def update_application(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    display_name: str | None = typer.Option(None, "--display-name"),
    description: str | None = typer.Option(None, "--description"),
    owner: str | None = typer.Option(None, "--owner"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Metadata tag KEY=VALUE. Repeatable."),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Replace an application's metadata with the given fields."""
    metadata = _metadata(display_name, description, owner, tag) or ApplicationMetadata()
    configurator = ApplicationConfigurator(open_storage(data_dir))
    request = UpdateApplicationRequest(identifier=ApplicationIdentifier(account, team, moniker), metadata=metadata)
    application = unwrap_or_exit(configurator.update(request))
    _show(application, json_out, title=f"Updated {account}/{team}/{moniker}")


@app.command("delete")
def delete_application(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
    data_dir: Path | None = data_dir_option(),
) -> None:
    """Delete an application's configuration record."""
    if not yes:
        typer.confirm(f"Delete application {account}/{team}/{moniker}?", abort=True)
    configurator = ApplicationConfigurator(open_storage(data_dir))
    unwrap_or_exit(configurator.delete(ApplicationIdentifier(account, team, moniker)))
    console.print(f"[green]✓[/green] Deleted {account}/{team}/{moniker}")


@app.command("check")
def check_application(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    since: str | None = typer.Option(
        None,
        "--since",
        help="ISO-8601 timestamp of your local copy; reports whether the stored copy is newer.",
    ),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Check that an application exists and its stored record is sound.

    Exits 1 when the application is missing or its record has problems.
    """
    configurator = ApplicationConfigurator(open_storage(data_dir))
    identifier = ApplicationIdentifier(account, team, moniker)

    if not configurator.exists(identifier):
        if json_out:
            emit_json({"exists": False})
        else:
            console.print(f"[yellow]![/yellow] {account}/{team}/{moniker} does not exist")
        raise typer.Exit(code=1)

    report = unwrap_or_exit(configurator.validate(identifier))
    payload: dict[str, object] = {"exists": True, "valid": report.valid}
    if since is not None:
        try:
            local = from_iso8601(since)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--since") from e
        payload["needsUpdate"] = unwrap_or_exit(configurator.needs_update(identifier, local))

    if json_out:
        payload["failures"] = [failure.to_storage() for failure in report.failures]
        emit_json(payload)
    else:
        print_fields(payload, title=f"{account}/{team}/{moniker}")
        if report.failures:
            print_rows([failure.to_storage() for failure in report.failures], title="Problems")

    if not report.valid:
        raise typer.Exit(code=1)
