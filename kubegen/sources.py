"""Route and command sources feeding the generator.

The generator only needs two read-only views of an application: the HTTP
routes it serves and the console commands it can run. ``ProjectFile`` backs
both with a ``kubegen.yml`` file in the project root.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

import yaml

from kubegen.core.logger import get_logger
from kubegen.models.deploy import GenerateConfig

logger = get_logger(__name__)

PROJECT_FILENAME = "kubegen.yml"
DEFAULT_APP_NAME = "app"


class ProjectFileError(Exception):
    """Raised when kubegen.yml cannot be parsed or has the wrong shape."""
    pass


class RouteDefinition(NamedTuple):
    """A route as reported by the application router."""

    pattern: str
    method: str = "GET"
    handler: str = "unknown"


@dataclass
class CommandMetadata:
    """What the application declares about one console command.

    ``type``, ``schedule`` and ``replicas`` are optional; missing values are
    inferred from the command name by the classifier.
    """

    description: str = ""
    type: Optional[str] = None
    schedule: Optional[str] = None
    replicas: Optional[int] = None
    args: List[str] = field(default_factory=list)
    env_vars: Dict[str, Any] = field(default_factory=dict)
    resources: Dict[str, str] = field(default_factory=dict)


class RouteSource(ABC):
    """Provides the routes exposed through the Ingress."""

    @abstractmethod
    def get_routes(self) -> Iterable[RouteDefinition]:
        pass


class CommandMetadataSource(ABC):
    """Provides console commands keyed by name."""

    @abstractmethod
    def get_all_commands(self) -> Mapping[str, CommandMetadata]:
        pass


def _section(data: Mapping[str, Any], key: str, expected: type, source: str) -> Any:
    value = data.get(key)
    if value is None:
        return expected()
    if not isinstance(value, expected):
        raise ProjectFileError(
            f"'{key}' in {source} must be a {expected.__name__}, got {type(value).__name__}"
        )
    return value


class ProjectFile(RouteSource, CommandMetadataSource):
    """kubegen.yml: application facts, routes and commands."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self.data: Mapping[str, Any] = data or {}
        self._source = str(self.path) if self.path else PROJECT_FILENAME

        self.app: Dict[str, Any] = _section(self.data, "app", dict, self._source)
        self._routes: List[Any] = _section(self.data, "routes", list, self._source)
        self._commands: Dict[str, Any] = _section(self.data, "commands", dict, self._source)

    @classmethod
    def load(cls, path: Path) -> "ProjectFile":
        """Load a project file.

        A missing file yields an empty project (default app, no routes, no
        commands).

        Raises:
            ProjectFileError: If the file is not valid YAML or not a mapping
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"No project file at {path}, using defaults")
            return cls({}, path)

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ProjectFileError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProjectFileError(f"{path} must contain a mapping at the top level")

        return cls(data, path)

    @property
    def app_name(self) -> str:
        return str(self.app.get("name") or DEFAULT_APP_NAME)

    @property
    def environments(self) -> List[str]:
        return [str(env) for env in _section(self.data, "environments", list, self._source)]

    def get_routes(self) -> List[RouteDefinition]:
        routes = []
        for entry in self._routes:
            if isinstance(entry, str):
                routes.append(RouteDefinition(pattern=entry))
                continue
            if not isinstance(entry, dict):
                raise ProjectFileError(f"Route entries in {self._source} must be mappings: {entry!r}")
            routes.append(RouteDefinition(
                pattern=str(entry.get("path", entry.get("pattern", "/"))),
                method=str(entry.get("method", "GET")).upper(),
                handler=str(entry.get("handler", "unknown")),
            ))
        return routes

    def get_all_commands(self) -> Dict[str, CommandMetadata]:
        commands = {}
        for name, entry in self._commands.items():
            entry = entry or {}
            if not isinstance(entry, dict):
                raise ProjectFileError(f"Command '{name}' in {self._source} must be a mapping")

            args = entry.get("args") or []
            if isinstance(args, str):
                args = args.split()

            replicas = entry.get("replicas")
            commands[str(name)] = CommandMetadata(
                description=str(entry.get("description", "")),
                type=entry.get("type"),
                schedule=entry.get("schedule"),
                replicas=int(replicas) if replicas is not None else None,
                args=[str(arg) for arg in args],
                env_vars=dict(entry.get("env_vars") or entry.get("env") or {}),
                resources=dict(entry.get("resources") or {}),
            )
        return commands

    def build_config(self, env_name: str, deploy_path: Optional[str] = None) -> GenerateConfig:
        """Build the deployment config for one environment.

        Values missing from the app section fall back to
        GenerateConfig.create_default conventions.

        Args:
            env_name: Target environment
            deploy_path: Deploy tree used when the app section names none
        """
        defaults = GenerateConfig.create_default(self.app_name, env_name)
        app = self.app

        return GenerateConfig(
            app_name=defaults.app_name,
            image_name=str(app.get("image", defaults.image_name)),
            image_tag=str(app.get("tag", defaults.image_tag)),
            domain=str(app.get("domain", defaults.domain)),
            namespace=str(app.get("namespace", defaults.namespace)),
            env_name=env_name,
            env_vars=dict(app.get("env_vars") or {}),
            resources=dict(app.get("resources") or {}),
            replicas=int(app.get("replicas", defaults.replicas)),
            deploy_path=str(app.get("deploy_path", deploy_path or defaults.deploy_path)),
        )
