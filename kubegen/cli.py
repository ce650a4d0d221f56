#!/usr/bin/env python3
"""kubegen CLI - Kubernetes manifests from routes and commands."""

import typer
from rich.console import Console

from kubegen.cli_k8s_commands import register_k8s_commands

app = typer.Typer(
    name="kubegen",
    help="""kubegen - Kubernetes manifests from routes and commands

Ingress, Deployments and CronJobs rendered from kubegen.yml.

Quick start:
  kubegen init                # Seed deploy/ with base + overlays
  kubegen generate            # Render every manifest
  kubegen cronjob --list      # Preview scheduled commands

More commands: kubegen --help
""",
    add_completion=False,
)

console = Console()

register_k8s_commands(app, console)

if __name__ == "__main__":
    app()
