"""Kubernetes manifest generation.

Generates Ingress, Deployment (daemon) and CronJob manifests for an
application and keeps deploy/base/kustomization.yaml listing them.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from kubegen.core import binder
from kubegen.core.classifier import classify
from kubegen.core.config import KubegenConfig
from kubegen.core.kustomization import RegisterResult, ResourceIndex
from kubegen.core.logger import get_logger
from kubegen.core.renderer import TemplateRenderer
from kubegen.core.template_loader import TemplateError, TemplateResolver
from kubegen.core.writer import ManifestWriter
from kubegen.models.deploy import CommandInfo, GenerateConfig, RouteInfo
from kubegen.scaffold.core import ScaffoldManager
from kubegen.sources import (
    DEFAULT_APP_NAME,
    CommandMetadataSource,
    ProjectFileError,
    RouteSource,
)

logger = get_logger(__name__)

INGRESS_TEMPLATE = "ingress-tpl.yaml"
DAEMON_TEMPLATE = "daemon-tpl.yaml"
CRONJOB_TEMPLATE = "cronjob-tpl.yaml"

INDEX_FILENAME = "kustomization.yaml"
BASE_LAYER = "base"

# Outer values every ROUTES item can reference
ROUTE_SHARED_KEYS = ("APP_NAME", "NAMESPACE", "DOMAIN")

# Failures that end one generate_all step without stopping the others
STEP_ERRORS = (TemplateError, ValidationError, ProjectFileError, OSError)


@dataclass
class GenerationReport:
    """Summary of a generate-everything run."""

    generated: Dict[str, List[str]] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(names) for names in self.generated.values())

    @property
    def ok(self) -> bool:
        return not self.errors


class KubernetesGenerator:
    """Turns routes and commands into manifests under the deploy tree."""

    def __init__(
        self,
        routes: RouteSource,
        commands: CommandMetadataSource,
        settings: Optional[KubegenConfig] = None,
        renderer: Optional[TemplateRenderer] = None,
        app_name: str = DEFAULT_APP_NAME,
    ):
        """Initialize the generator.

        Args:
            routes: Source of HTTP routes for the Ingress
            commands: Source of console commands for daemons and cronjobs
            settings: Runtime configuration (project root, template dirs)
            renderer: Template renderer shared by writer and scaffold
            app_name: APP_NAME used when rendering environment overlays
        """
        self.routes = routes
        self.commands = commands
        self.settings = settings or KubegenConfig()
        self.renderer = renderer or TemplateRenderer()
        self.writer = ManifestWriter(self.renderer)
        self.scaffold = ScaffoldManager(self.writer)
        self.index = ResourceIndex(create_missing_header=self.settings.create_missing_header)
        self.app_name = app_name
        self.write_failures: List[Path] = []

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def deploy_dir(self, config: Optional[GenerateConfig] = None) -> Path:
        """Deploy tree for a config (falls back to the configured one)."""
        if config is None:
            return self.settings.deploy_path
        return self.settings.project_root / config.deploy_path

    def resolver(self, config: Optional[GenerateConfig] = None) -> TemplateResolver:
        return TemplateResolver(
            override_dir=self.deploy_dir(config) / BASE_LAYER / "templates",
            builtin_dir=self.settings.builtin_template_dir,
        )

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize(self, environments: Iterable[str]) -> bool:
        """Seed the deploy tree with base templates and environment overlays.

        Existing files are never overwritten.

        Args:
            environments: Environment names (one overlay directory each)

        Returns:
            True if every overlay was seeded and rendered

        Raises:
            ScaffoldSourceMissing: If the built-in template tree is missing
        """
        environments = list(environments)
        deploy_dir = self.deploy_dir()
        builtin_root = self.settings.builtin_template_root

        logger.info(f"Initializing {deploy_dir} for: {', '.join(environments)}")

        self.scaffold.seed(builtin_root / BASE_LAYER, deploy_dir / BASE_LAYER)

        success = True
        for env in environments:
            env_dir = deploy_dir / env
            try:
                self.scaffold.seed(builtin_root / "env", env_dir)
            except OSError as e:
                logger.error(f"Failed to seed {env_dir}: {e}")
                success = False
                continue

            index_file = env_dir / INDEX_FILENAME
            if index_file.exists():
                variables = {
                    "ENV_NAME": env,
                    "NAMESPACE": env,
                    "APP_NAME": self.app_name,
                    "IMAGE_TAG": "latest",
                }
                if not self.scaffold.render_in_place(index_file, variables):
                    success = False

        if success:
            logger.info("✓ Deploy tree initialized")
        return success

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate_ingress(self, config: GenerateConfig) -> str:
        """Render the Ingress for all routes.

        Returns:
            Rendered manifest, or an empty string when there are no routes

        Raises:
            TemplateError: If the ingress template cannot be loaded
        """
        logger.info(f"Generating Ingress for {config.app_name}")

        routes = self.extract_routes(config)
        if not routes:
            logger.warning("No routes found, skipping Ingress")
            return ""

        variables = binder.config_variables(config)
        variables["ROUTES"] = binder.with_shared_scope(
            [binder.route_variables(route) for route in routes],
            variables,
            ROUTE_SHARED_KEYS,
        )

        template = self.resolver(config).resolve(INGRESS_TEMPLATE)
        manifest = self.renderer.render(template, variables)
        self._persist(config, "ingress.yaml", manifest)
        return manifest

    def generate_daemon(
        self, config: GenerateConfig, names: Optional[Iterable[str]] = None
    ) -> Dict[str, str]:
        """Render a Deployment per daemon command.

        Args:
            config: Deployment config
            names: Restrict to these command names (all daemons when empty)

        Returns:
            Mapping of command name to rendered manifest
        """
        names = list(names or [])
        logger.info(f"Generating daemons for {config.app_name}")

        results: Dict[str, str] = {}
        template: Optional[str] = None

        for command in self.get_commands("daemon", names):
            if template is None:
                template = self.resolver(config).resolve(DAEMON_TEMPLATE)

            manifest = self.renderer.render(template, binder.command_variables(command, config))
            self._persist(config, f"daemon-{command.resource_name}.yaml", manifest)
            results[command.name] = manifest

        return results

    def generate_cronjob(
        self, config: GenerateConfig, names: Optional[Iterable[str]] = None
    ) -> Dict[str, str]:
        """Render a CronJob per cronjob command.

        Commands with an invalid schedule are skipped with a warning.

        Args:
            config: Deployment config
            names: Restrict to these command names (all cronjobs when empty)

        Returns:
            Mapping of command name to rendered manifest
        """
        names = list(names or [])
        logger.info(f"Generating cronjobs for {config.app_name}")

        results: Dict[str, str] = {}
        template: Optional[str] = None

        for command in self.get_commands("cronjob", names):
            if not command.is_valid_schedule():
                logger.warning(
                    f"Skipping cronjob '{command.name}': invalid schedule {command.schedule!r}"
                )
                continue

            if template is None:
                template = self.resolver(config).resolve(CRONJOB_TEMPLATE)

            manifest = self.renderer.render(template, binder.command_variables(command, config))
            self._persist(config, f"cronjob-{command.resource_name}.yaml", manifest)
            results[command.name] = manifest

        return results

    def generate_all(self, config: GenerateConfig) -> GenerationReport:
        """Generate ingress, daemons and cronjobs, continuing past failures."""
        report = GenerationReport()
        self.write_failures = []

        steps = (
            ("ingress", lambda: self._ingress_results(config)),
            ("daemon", lambda: self.generate_daemon(config)),
            ("cronjob", lambda: self.generate_cronjob(config)),
        )

        for kind, step in steps:
            try:
                results = step()
            except STEP_ERRORS as e:
                logger.error(f"{kind} generation failed: {e}")
                report.errors.append(f"{kind}: {e}")
                continue

            if results:
                report.generated[kind] = list(results)
            else:
                report.skipped.append(kind)

        report.errors.extend(f"write failed: {path}" for path in self.write_failures)
        return report

    def _ingress_results(self, config: GenerateConfig) -> Dict[str, str]:
        manifest = self.generate_ingress(config)
        return {"ingress": manifest} if manifest else {}

    def list_resources(self, config: GenerateConfig) -> Dict[str, Any]:
        """Preview what generation would produce, without writing anything.

        ``registered`` lists the resources deploy/base/kustomization.yaml
        already holds.
        """
        routes = self.extract_routes(config)
        daemons = self.get_commands("daemon")
        cronjobs = self.get_commands("cronjob")

        return {
            "ingress": {
                "count": len(routes),
                "routes": [
                    {"path": route.normalized_path, "method": route.method, "handler": route.handler}
                    for route in routes
                ],
            },
            "daemon": {
                "count": len(daemons),
                "commands": [
                    {
                        "name": command.name,
                        "description": command.description,
                        "replicas": command.replicas,
                    }
                    for command in daemons
                ],
            },
            "cronjob": {
                "count": len(cronjobs),
                "commands": [
                    {
                        "name": command.name,
                        "description": command.description,
                        "schedule": command.schedule,
                        "valid": command.is_valid_schedule(),
                    }
                    for command in cronjobs
                ],
            },
            "registered": self.index.entries(self.deploy_dir(config) / BASE_LAYER / INDEX_FILENAME),
        }

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def extract_routes(self, config: Optional[GenerateConfig] = None) -> List[RouteInfo]:
        """Build route records, pointing them at the app's service."""
        service = {}
        if config is not None:
            service = {"service_name": config.service_name, "service_port": binder.SERVICE_PORT}

        return [
            RouteInfo(
                path=route.pattern or "/",
                method=route.method or "GET",
                handler=route.handler or "unknown",
                **service,
            )
            for route in self.routes.get_routes()
        ]

    def get_commands(self, kind: str, names: Optional[Iterable[str]] = None) -> List[CommandInfo]:
        """Commands of one kind, optionally restricted to the given names."""
        wanted = set(names or [])
        commands = []

        for name, metadata in self.commands.get_all_commands().items():
            if wanted and name not in wanted:
                continue

            shape = classify(
                name,
                declared_kind=metadata.type,
                declared_schedule=metadata.schedule,
                declared_replicas=metadata.replicas,
            )
            if shape.kind != kind:
                continue

            commands.append(CommandInfo(
                name=name,
                description=metadata.description,
                args=metadata.args,
                env_vars=metadata.env_vars,
                kind=shape.kind,
                schedule=shape.schedule,
                replicas=shape.replicas,
                resources=metadata.resources,
            ))

        return commands

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _persist(self, config: GenerateConfig, filename: str, manifest: str) -> bool:
        base_dir = self.deploy_dir(config) / BASE_LAYER
        output = base_dir / filename

        if not self.writer.write_text(manifest, output):
            self.write_failures.append(output)
            return False

        result = self.index.register(base_dir / INDEX_FILENAME, filename)
        if result is RegisterResult.FAILED:
            self.write_failures.append(base_dir / INDEX_FILENAME)

        if result.changed:
            logger.info(f"✓ {output} (added to {INDEX_FILENAME})")
        else:
            logger.info(f"✓ {output}")
        return True
