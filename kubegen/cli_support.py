"""Shared utilities for kubegen CLI modules."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from kubegen.core.config import KubegenConfig
from kubegen.core.generator import KubernetesGenerator
from kubegen.sources import PROJECT_FILENAME, ProjectFile


def find_project_root(root: Optional[str] = None) -> Path:
    """Locate the project root.

    Order: explicit --root, $KUBEGEN_ROOT, the nearest directory upwards
    holding kubegen.yml, the current directory.
    """
    if root:
        return Path(root).resolve()

    if env_root := os.environ.get("KUBEGEN_ROOT"):
        return Path(env_root).resolve()

    cwd = Path.cwd().resolve()
    for candidate in [cwd, *cwd.parents]:
        if (candidate / PROJECT_FILENAME).exists():
            return candidate

    return cwd


def parse_environments(value: Optional[str]) -> List[str]:
    """Split a comma-separated environment list."""
    if not value:
        return []
    return [env.strip() for env in value.split(",") if env.strip()]


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from kubegen.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def load_project(root: Optional[str]) -> Tuple[KubegenConfig, ProjectFile, KubernetesGenerator]:
    """Load settings and kubegen.yml, and build a generator for them.

    Returns:
        Tuple of (settings, project, generator)
    """
    settings = KubegenConfig.from_env(find_project_root(root))
    project = ProjectFile.load(settings.project_root / PROJECT_FILENAME)
    if project.app.get("deploy_path"):
        settings.deploy_dir = str(project.app["deploy_path"])
    generator = KubernetesGenerator(
        routes=project,
        commands=project,
        settings=settings,
        app_name=project.app_name,
    )
    return settings, project, generator


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting."""
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting."""
    console.print(f"[red]{prefix}[/red] {escape(message)}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting."""
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {message}")
