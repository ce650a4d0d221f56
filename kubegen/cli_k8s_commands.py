"""Manifest commands - init, ingress, daemon, cronjob, generate."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from kubegen.cli_support import (
    handle_cli_error,
    load_project,
    parse_environments,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_file_logging,
)

DEFAULT_ENV = "production"

# Module-level console (replaced by register function)
console: Console = Console()

RootOption = typer.Option(None, "--root", "-r", help="Project root (default: nearest kubegen.yml)")
EnvOption = typer.Option(DEFAULT_ENV, "--env", "-e", help="Environment the manifests are rendered for")
ListOption = typer.Option(False, "--list", "-l", help="Preview resources without generating")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose logging")
LogFileOption = typer.Option(None, "--log-file", help="Write logs to this file")


def _start(root: Optional[str], log_file: Optional[str], verbose: bool):
    if log_file or verbose:
        setup_file_logging(log_file=log_file, verbose=verbose)
    return load_project(root)


def init(
    envs: Optional[str] = typer.Option(None, "--envs", help="Comma-separated environments (e.g. local,development,production)"),
    root: Optional[str] = RootOption,
    verbose: bool = VerboseOption,
    log_file: Optional[str] = LogFileOption,
):
    """Initialize the deploy/ tree with base templates and environment overlays.

    Existing files are kept, so re-running init only adds what is missing.

    Examples:
        kubegen init
        kubegen init --envs staging,production
    """
    try:
        settings, project, generator = _start(root, log_file, verbose)
        environments = (
            parse_environments(envs) or project.environments or settings.environments
        )

        console.print("[cyan]Initializing Kubernetes manifests...[/cyan]")
        console.print(f"Environments: {', '.join(environments)}")

        if generator.initialize(environments):
            print_success(console, f"Deploy tree ready in {generator.deploy_dir()}")
            return

        print_error(console, "Initialization finished with errors")
        raise typer.Exit(1)
    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, console, verbose)


def ingress(
    env: str = EnvOption,
    list_only: bool = ListOption,
    root: Optional[str] = RootOption,
    verbose: bool = VerboseOption,
    log_file: Optional[str] = LogFileOption,
):
    """Generate the Ingress manifest from the project's routes."""
    try:
        settings, project, generator = _start(root, log_file, verbose)
        config = project.build_config(env, settings.deploy_dir)

        if list_only:
            resources = generator.list_resources(config)
            _show_routes(resources)
            _show_registered(resources)
            return

        console.print("[cyan]Generating Ingress...[/cyan]")
        if not generator.generate_ingress(config):
            print_warning(console, "No Ingress generated (no routes)")
            return

        print_success(console, "Ingress generated")
        _check_writes(generator.write_failures)
    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, console, verbose)


def daemon(
    names: Optional[List[str]] = typer.Argument(None, help="Commands to generate (default: all daemons)"),
    env: str = EnvOption,
    list_only: bool = ListOption,
    root: Optional[str] = RootOption,
    verbose: bool = VerboseOption,
    log_file: Optional[str] = LogFileOption,
):
    """Generate Deployment manifests for daemon commands."""
    try:
        settings, project, generator = _start(root, log_file, verbose)
        config = project.build_config(env, settings.deploy_dir)

        if list_only:
            resources = generator.list_resources(config)
            _show_commands(resources, "daemon")
            _show_registered(resources)
            return

        console.print("[cyan]Generating daemons...[/cyan]")
        results = generator.generate_daemon(config, names)
        _report_generated(results, "daemon")
        _check_writes(generator.write_failures)
    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, console, verbose)


def cronjob(
    names: Optional[List[str]] = typer.Argument(None, help="Commands to generate (default: all cronjobs)"),
    env: str = EnvOption,
    list_only: bool = ListOption,
    root: Optional[str] = RootOption,
    verbose: bool = VerboseOption,
    log_file: Optional[str] = LogFileOption,
):
    """Generate CronJob manifests for scheduled commands."""
    try:
        settings, project, generator = _start(root, log_file, verbose)
        config = project.build_config(env, settings.deploy_dir)

        if list_only:
            resources = generator.list_resources(config)
            _show_commands(resources, "cronjob")
            _show_registered(resources)
            return

        console.print("[cyan]Generating cronjobs...[/cyan]")
        results = generator.generate_cronjob(config, names)
        _report_generated(results, "cronjob")
        _check_writes(generator.write_failures)
    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, console, verbose)


def generate(
    env: str = EnvOption,
    root: Optional[str] = RootOption,
    verbose: bool = VerboseOption,
    log_file: Optional[str] = LogFileOption,
):
    """Generate Ingress, daemon and cronjob manifests in one go."""
    try:
        settings, project, generator = _start(root, log_file, verbose)
        config = project.build_config(env, settings.deploy_dir)

        console.print("[cyan]Generating all Kubernetes manifests...[/cyan]")
        report = generator.generate_all(config)
    except Exception as e:
        handle_cli_error(e, console, verbose)
        return

    for kind, names in report.generated.items():
        print_success(console, f"{kind}: {len(names)} manifest(s)")
    for kind in report.skipped:
        print_warning(console, f"{kind}: nothing to generate")
    for error in report.errors:
        print_error(console, error)

    if not report.ok:
        print_error(console, f"Finished with {len(report.errors)} error(s)")
        raise typer.Exit(1)

    print_success(console, f"Generated {report.total} resource(s)")


def _report_generated(results: Dict[str, str], kind: str) -> None:
    if not results:
        print_warning(console, f"No {kind} manifests generated (no {kind} commands)")
        return
    print_success(console, f"Generated {len(results)} {kind} manifest(s)")
    for name in results:
        console.print(f"  - {name}")


def _check_writes(failures: List[Any]) -> None:
    if not failures:
        return
    for path in failures:
        print_error(console, f"Could not write {path}")
    raise typer.Exit(1)


def _show_routes(resources: Dict[str, Any]) -> None:
    routes = resources["ingress"]["routes"]
    if not routes:
        print_info(console, "No routes")
        return

    table = Table(title="Ingress routes")
    table.add_column("Method", style="cyan")
    table.add_column("Path")
    table.add_column("Handler", style="dim")
    for route in routes:
        table.add_row(route["method"], route["path"], route["handler"])
    console.print(table)


def _show_commands(resources: Dict[str, Any], kind: str) -> None:
    commands = resources[kind]["commands"]
    if not commands:
        print_info(console, f"No {kind} commands")
        return

    table = Table(title=f"{kind.capitalize()} commands")
    table.add_column("Name", style="cyan")
    if kind == "daemon":
        table.add_column("Replicas", justify="right")
    else:
        table.add_column("Schedule")
        table.add_column("Valid", justify="center")
    table.add_column("Description", style="dim")

    for command in commands:
        if kind == "daemon":
            table.add_row(command["name"], str(command["replicas"]), command["description"])
        else:
            table.add_row(
                command["name"],
                command["schedule"] or "N/A",
                "✓" if command["valid"] else "✗",
                command["description"],
            )
    console.print(table)


def _show_registered(resources: Dict[str, Any]) -> None:
    registered = resources["registered"]
    if not registered:
        print_info(console, "Nothing registered in base/kustomization.yaml yet")
        return
    print_info(console, f"Registered in base/kustomization.yaml: {', '.join(registered)}")


def register_k8s_commands(app: typer.Typer, shared_console: Console) -> None:
    """Attach manifest commands to the main Typer app."""
    global console
    console = shared_console

    app.command("init")(init)
    app.command("ingress")(ingress)
    app.command("daemon")(daemon)
    app.command("cronjob")(cronjob)
    app.command("generate")(generate)
