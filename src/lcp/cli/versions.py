"""
CLI: ``lcp version`` — version, artifact and policy commands.

Usage::

    lcp version init acme core billing 1.0.0 -D database:postgres -D queue:rabbitmq
    lcp version show acme core billing 1.0.0
    lcp version cache acme core billing 1.0.0 ./dist/billing.zip --content-type application/zip
    lcp version policy acme core billing 1.0.0 --kind cicd
    lcp version policy acme core billing 1.0.0 --publish
    lcp version validate acme core billing 1.0.0
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from lcp.adapters import DefaultPolicyProvider
from lcp.cli.utils import (
    console,
    data_dir_option,
    emit_json,
    json_option,
    open_storage,
    parse_dependency,
    parse_pairs,
    print_fields,
    print_rows,
    unwrap_or_exit,
)
from lcp.configure import (
    CacheArtifactRequest,
    InitVersionRequest,
    UpdateVersionRequest,
    VersionConfigurator,
    VersionIdentifier,
)
from lcp.core.settings import get_settings
from lcp.domain.models import ArtifactUploadMetadata, VersionMetadata
from lcp.domain.version import Version

app = typer.Typer(no_args_is_help=True)


class PolicyKind(str, Enum):
    APP = "app"
    CICD = "cicd"


def _configurator(data_dir: Path | None) -> VersionConfigurator:
    return VersionConfigurator(open_storage(data_dir), DefaultPolicyProvider())


def _metadata(
    release_notes: str | None,
    build_number: str | None,
    commit_sha: str | None,
    tags: list[str],
) -> VersionMetadata | None:
    parsed_tags = parse_pairs(tags, "--tag") or None
    if not any((release_notes, build_number, commit_sha, parsed_tags)):
        return None
    return VersionMetadata(
        release_notes=release_notes,
        build_number=build_number,
        commit_sha=commit_sha,
        tags=parsed_tags,
    )


def _show(version: Version, as_json: bool, title: str) -> None:
    record = version.to_record()
    if as_json:
        emit_json(record)
        return
    data = record.to_storage()
    dependencies = data.pop("dependencies", [])
    print_fields(data, title=title)
    print_rows(
        [{"type": dep["type"], "name": dep["name"]} for dep in dependencies],
        title="Dependencies",
    )


@app.command("init")
def init_version(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(..., help="Semantic version, e.g. 1.2.0 or 2.0.0-rc1."),
    dependency: list[str] = typer.Option(
        [], "--dependency", "-D", help="Dependency TYPE:NAME, in deployment order. Repeatable."
    ),
    release_notes: str | None = typer.Option(None, "--release-notes"),
    build_number: str | None = typer.Option(None, "--build-number"),
    commit_sha: str | None = typer.Option(None, "--commit-sha"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Metadata tag KEY=VALUE. Repeatable."),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Register a new version of an existing application."""
    request = InitVersionRequest(
        identifier=VersionIdentifier(account, team, moniker, version),
        dependencies=[parse_dependency(spec) for spec in dependency],
        metadata=_metadata(release_notes, build_number, commit_sha, tag),
    )
    created = unwrap_or_exit(_configurator(data_dir).init(request))
    _show(created, json_out, title=f"Initialized {moniker} {version}")


@app.command("show")
def show_version(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Show a stored version."""
    found = unwrap_or_exit(_configurator(data_dir).read(VersionIdentifier(account, team, moniker, version)))
    _show(found, json_out, title=f"{account}/{team}/{moniker} {version}")


@app.command("update")
def update_version(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    dependency: list[str] = typer.Option(
        [], "--dependency", "-D", help="Replacement dependency list TYPE:NAME. Repeatable."
    ),
    clear_dependencies: bool = typer.Option(False, "--clear-dependencies", help="Remove all dependencies."),
    release_notes: str | None = typer.Option(None, "--release-notes"),
    build_number: str | None = typer.Option(None, "--build-number"),
    commit_sha: str | None = typer.Option(None, "--commit-sha"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Metadata tag KEY=VALUE. Repeatable."),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Replace a version's dependencies and/or metadata.

    Fields that are not given are left as stored.
    """
    dependencies = [parse_dependency(spec) for spec in dependency] if dependency or clear_dependencies else None
    request = UpdateVersionRequest(
        identifier=VersionIdentifier(account, team, moniker, version),
        dependencies=dependencies,
        metadata=_metadata(release_notes, build_number, commit_sha, tag),
    )
    updated = unwrap_or_exit(_configurator(data_dir).update(request))
    _show(updated, json_out, title=f"Updated {moniker} {version}")


@app.command("delete")
def delete_version(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
    data_dir: Path | None = data_dir_option(),
) -> None:
    """Delete a version's configuration record."""
    if not yes:
        typer.confirm(f"Delete {account}/{team}/{moniker} {version}?", abort=True)
    unwrap_or_exit(_configurator(data_dir).delete(VersionIdentifier(account, team, moniker, version)))
    console.print(f"[green]✓[/green] Deleted {moniker} {version}")


@app.command("cache")
def cache_artifact(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    artifact: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Build artifact file."),
    content_type: str | None = typer.Option(
        None, "--content-type", help="Defaults to LCP_DEFAULT_CONTENT_TYPE."
    ),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Upload a build artifact for a version. Each version takes one artifact."""
    metadata = ArtifactUploadMetadata(
        size=artifact.stat().st_size,
        content_type=content_type or get_settings().default_content_type,
    )
    with artifact.open("rb") as stream:
        request = CacheArtifactRequest(
            identifier=VersionIdentifier(account, team, moniker, version),
            stream=stream,
            metadata=metadata,
        )
        reference = unwrap_or_exit(_configurator(data_dir).cache(request))

    if json_out:
        emit_json(reference)
    else:
        print_fields(reference.to_storage(), title=f"Cached artifact for {moniker} {version}")


@app.command("policy")
def policy(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    kind: PolicyKind = typer.Option(PolicyKind.APP, "--kind", "-k", help="Runtime (app) or pipeline (cicd) policy."),
    publish: bool = typer.Option(
        False, "--publish", help="Store both policies beside the version and record their paths."
    ),
    data_dir: Path | None = data_dir_option(),
) -> None:
    """Generate a version's least-privilege policy from its dependencies."""
    configurator = _configurator(data_dir)
    identifier = VersionIdentifier(account, team, moniker, version)

    if publish:
        references = unwrap_or_exit(configurator.publish_policies(identifier))
        print_fields(references.to_storage(), title=f"Published policies for {moniker} {version}")
        return

    generate = configurator.generate_app_policy if kind is PolicyKind.APP else configurator.generate_cicd_policy
    document = unwrap_or_exit(generate(identifier))
    typer.echo(configurator.policy.serialize_policy(document))


@app.command("validate")
def validate_version(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Check a version's dependency list. Exits 1 when problems are found."""
    report = unwrap_or_exit(
        _configurator(data_dir).validate_dependencies(VersionIdentifier(account, team, moniker, version))
    )
    if json_out:
        emit_json(report)
    elif report.valid:
        console.print(f"[green]✓[/green] {moniker} {version}: dependencies are valid")
    else:
        print_rows([failure.to_storage() for failure in report.failures], title="Dependency problems")

    if not report.valid:
        raise typer.Exit(code=1)
