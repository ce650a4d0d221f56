"""kubegen runtime configuration and settings."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Built-in templates ship inside the package: kubegen/templates/
BUILTIN_TEMPLATE_ROOT = Path(__file__).parent.parent / "templates"

DEFAULT_ENVIRONMENTS = ["local", "development", "production"]


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class KubegenConfig:
    """Runtime configuration for manifest generation.

    Attributes:
        project_root: Directory the deploy tree lives under
        deploy_dir: Deploy tree name relative to project_root (default: deploy)
        builtin_template_root: Directory holding the built-in base/ and env/ trees
        create_missing_header: Append a resources: section to index files lacking one
        environments: Environments seeded by `kubegen init` when none are given
    """

    project_root: Path = field(default_factory=Path.cwd)
    deploy_dir: str = "deploy"
    builtin_template_root: Path = BUILTIN_TEMPLATE_ROOT
    create_missing_header: bool = False
    environments: List[str] = field(default_factory=lambda: list(DEFAULT_ENVIRONMENTS))

    @property
    def deploy_path(self) -> Path:
        return self.project_root / self.deploy_dir

    @property
    def override_template_dir(self) -> Path:
        """User templates, checked before the built-in ones."""
        return self.deploy_path / "base" / "templates"

    @property
    def builtin_template_dir(self) -> Path:
        return self.builtin_template_root / "base" / "templates"

    def layer_path(self, layer: str) -> Path:
        """Directory of a kustomize layer (``base`` or an environment name)."""
        return self.deploy_path / layer

    @classmethod
    def from_env(cls, project_root: Optional[Path] = None) -> "KubegenConfig":
        """Create config from environment variables.

        Environment variables:
            KUBEGEN_DEPLOY_DIR: Deploy tree name relative to the project root
            KUBEGEN_TEMPLATE_DIR: Alternative built-in template root
            KUBEGEN_CREATE_MISSING_HEADER: Create missing resources: headers (1/true)
            KUBEGEN_ENVIRONMENTS: Comma-separated default environments

        Returns:
            KubegenConfig instance with values from environment or defaults
        """
        environments = os.getenv("KUBEGEN_ENVIRONMENTS")
        template_dir = os.getenv("KUBEGEN_TEMPLATE_DIR")

        return cls(
            project_root=Path(project_root) if project_root else Path.cwd(),
            deploy_dir=os.getenv("KUBEGEN_DEPLOY_DIR", "deploy"),
            builtin_template_root=Path(template_dir) if template_dir else BUILTIN_TEMPLATE_ROOT,
            create_missing_header=_env_flag("KUBEGEN_CREATE_MISSING_HEADER", False),
            environments=(
                [env.strip() for env in environments.split(",") if env.strip()]
                if environments
                else list(DEFAULT_ENVIRONMENTS)
            ),
        )
