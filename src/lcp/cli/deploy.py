"""
CLI: ``lcp deploy`` — dependency and application deployment.

The CLI drives the :class:`~lcp.adapters.SimulatedDeploymentProvider`: it
runs the full orchestration (tags, ordering, rollback) and reports what
would be deployed without provisioning anything. Failures can be injected
to rehearse a rollback.

Usage::

    lcp deploy dependencies acme core billing 1.0.0 -e dev
    lcp deploy dependencies acme core billing 1.0.0 -e dev --fail-dependency rabbitmq
    lcp deploy application acme core billing 1.0.0 -e prod --tag cost-center=42
"""

from __future__ import annotations

from pathlib import Path

import typer

from lcp.adapters import DefaultPolicyProvider, SimulatedDeploymentProvider
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
from lcp.configure import DeployRequest, VersionIdentifier
from lcp.core.settings import RollbackOrder
from lcp.deploy import DeployApplication, DeployDependencies

app = typer.Typer(no_args_is_help=True)


def _request(
    account: str, team: str, moniker: str, version: str, environment: str, tags: list[str]
) -> DeployRequest:
    return DeployRequest(
        identifier=VersionIdentifier(account, team, moniker, version),
        environment=environment,
        custom_tags=parse_pairs(tags, "--tag"),
    )


def _print_rollbacks(provider: SimulatedDeploymentProvider) -> None:
    rollbacks = provider.calls_for("rollback_deployment")
    if rollbacks:
        print_rows([{"rolled back": call.target} for call in rollbacks], title="Rollback")


@app.command("dependencies")
def deploy_dependencies(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    environment: str = typer.Option(..., "--environment", "-e", help="Target environment."),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Custom resource tag KEY=VALUE. Repeatable."),
    rollback_order: RollbackOrder | None = typer.Option(
        None, "--rollback-order", help="Order of rollback after a failure. Defaults to LCP_ROLLBACK_ORDER."
    ),
    fail_dependency: list[str] = typer.Option(
        [], "--fail-dependency", help="Simulate a failure deploying this dependency. Repeatable."
    ),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Deploy a version's dependencies in declaration order, rolling back on failure."""
    provider = SimulatedDeploymentProvider(fail_dependencies=fail_dependency)
    use_case = DeployDependencies(open_storage(data_dir), provider, rollback_order=rollback_order)

    result = use_case.execute(_request(account, team, moniker, version, environment, tag))
    if result.is_err():
        _print_rollbacks(provider)
    outcome = unwrap_or_exit(result)

    if json_out:
        emit_json(
            {
                "deployment": outcome.deployment.to_record().to_storage(),
                "results": [deployed.to_storage() for deployed in outcome.deployments],
            }
        )
        return

    rows = [
        {"type": resource.type, "name": resource.reference, "deployment": resource.id}
        for resource in outcome.deployment.deployed_resources
    ]
    print_rows(rows, title=f"{moniker} {version} → {environment}")
    console.print(f"[green]✓[/green] {len(rows)} dependencies deployed")


@app.command("application")
def deploy_application(
    account: str = typer.Argument(...),
    team: str = typer.Argument(...),
    moniker: str = typer.Argument(...),
    version: str = typer.Argument(...),
    environment: str = typer.Option(..., "--environment", "-e", help="Target environment."),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Custom resource tag KEY=VALUE. Repeatable."),
    fail: bool = typer.Option(False, "--fail", help="Simulate a failed application deployment."),
    data_dir: Path | None = data_dir_option(),
    json_out: bool = json_option(),
) -> None:
    """Deploy a version's cached artifact under its generated runtime policy."""
    provider = SimulatedDeploymentProvider(fail_application=fail)
    use_case = DeployApplication(open_storage(data_dir), DefaultPolicyProvider(), provider)

    deployed = unwrap_or_exit(use_case.execute(_request(account, team, moniker, version, environment, tag)))
    if json_out:
        emit_json(deployed)
    else:
        print_fields(deployed.to_storage(), title=f"{moniker} {version} → {environment}")
