"""Deployment records that feed manifest generation."""
import re
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ResourceKey = Literal["MEMORY_REQUEST", "MEMORY_LIMIT", "CPU_REQUEST", "CPU_LIMIT"]
EnvValue = Union[str, bool, int, float]

CommandKind = Literal["daemon", "cronjob"]
PathType = Literal["Prefix", "Exact", "ImplementationSpecific"]

APP_DEFAULT_RESOURCES: Dict[str, str] = {
    "MEMORY_REQUEST": "64Mi",
    "MEMORY_LIMIT": "512Mi",
    "CPU_REQUEST": "100m",
    "CPU_LIMIT": "500m",
}

COMMAND_DEFAULT_RESOURCES: Dict[str, str] = {
    "MEMORY_REQUEST": "128Mi",
    "MEMORY_LIMIT": "512Mi",
    "CPU_REQUEST": "100m",
    "CPU_LIMIT": "500m",
}

# Marks a parameterised route segment (e.g. /users/{id}, /assets/*)
PATH_PARAMETER_MARKERS = ("{", "*")


def normalize_path(path: str) -> str:
    """Normalize a route path for Ingress rules.

    Leading slash enforced, repeated slashes collapsed, trailing slash dropped
    except for the root path.

    Examples:
        >>> normalize_path("//a//b/")
        '/a/b'
        >>> normalize_path("")
        '/'
    """
    if not path.startswith("/"):
        path = "/" + path
    path = re.sub(r"/+", "/", path)
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/")
    return path or "/"


def derive_resource_name(name: str) -> str:
    """Turn a command name into a Kubernetes-safe resource name.

    Examples:
        >>> derive_resource_name("My Worker!")
        'my-worker-'
    """
    return re.sub(r"[^a-zA-Z0-9-]", "-", name).lower()


def merge_resources(defaults: Dict[str, str], overrides: Dict[str, str]) -> Dict[str, str]:
    merged = dict(defaults)
    merged.update(overrides)
    return merged


class GenerateConfig(BaseModel):
    """Application-wide facts for one generation run."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    app_name: str = Field(..., min_length=1, description="Application name")
    image_name: str = Field(..., min_length=1, description="Container image repository")
    image_tag: str = "latest"
    domain: str = Field(..., description="Ingress host")
    namespace: str
    env_name: str
    env_vars: Dict[str, EnvValue] = Field(default_factory=dict, description="Extra template variables")
    resources: Dict[ResourceKey, str] = Field(default_factory=dict, description="Resource quota overrides")
    replicas: int = Field(1, ge=0)
    deploy_path: str = "deploy"

    @property
    def service_name(self) -> str:
        return f"{self.app_name}-service"

    def merged_resources(self) -> Dict[str, str]:
        """Default quotas overridden by the configured ones."""
        return merge_resources(APP_DEFAULT_RESOURCES, self.resources)

    @classmethod
    def create_default(cls, app_name: str, env_name: str = "production") -> "GenerateConfig":
        """Build a config from an app name using conventional defaults."""
        return cls(
            app_name=app_name,
            image_name=app_name,
            image_tag="latest",
            domain=f"{app_name}.example.com",
            namespace=env_name,
            env_name=env_name,
        )


class RouteInfo(BaseModel):
    """One HTTP route exposed through the Ingress."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    path: str = "/"
    method: str = "GET"
    handler: str = "unknown"
    path_type: PathType = "Prefix"
    service_name: str = "app-service"
    service_port: int = 80

    @property
    def normalized_path(self) -> str:
        return normalize_path(self.path)

    @property
    def is_root(self) -> bool:
        return self.normalized_path == "/"

    @property
    def optimized_path_type(self) -> str:
        """Path type for the Ingress rule.

        Parameterised and root paths can only be matched by prefix.
        """
        if any(marker in self.path for marker in PATH_PARAMETER_MARKERS):
            return "Prefix"
        if self.is_root:
            return "Prefix"
        return self.path_type


class CommandInfo(BaseModel):
    """A console command deployed as a Deployment (daemon) or CronJob."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    args: List[str] = Field(default_factory=list)
    env_vars: Dict[str, EnvValue] = Field(default_factory=dict)
    kind: CommandKind = "daemon"
    schedule: Optional[str] = None
    replicas: int = Field(1, ge=0)
    resources: Dict[ResourceKey, str] = Field(default_factory=dict)

    @field_validator('args', mode='before')
    @classmethod
    def coerce_args(cls, v):
        """Accept a single argument string as well as a list."""
        if isinstance(v, str):
            return [v]
        return v

    @property
    def resource_name(self) -> str:
        return derive_resource_name(self.name)

    @property
    def is_cronjob(self) -> bool:
        return self.kind == "cronjob"

    def merged_resources(self) -> Dict[str, str]:
        return merge_resources(COMMAND_DEFAULT_RESOURCES, self.resources)

    def is_valid_schedule(self) -> bool:
        """Check the cron schedule has 5 or 6 fields.

        Daemons carry no schedule and are always valid; a cronjob without a
        schedule is not.
        """
        if not self.is_cronjob:
            return True
        if self.schedule is None:
            return False
        return len(self.schedule.split()) in (5, 6)
