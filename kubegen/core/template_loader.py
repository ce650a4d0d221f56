"""Template lookup for manifest generation."""
from pathlib import Path
from typing import List, Optional

from kubegen.core.logger import get_logger

logger = get_logger(__name__)


class TemplateError(Exception):
    """Base class for template lookup failures."""
    pass


class TemplateNotFound(TemplateError):
    """Raised when neither the override nor the built-in template exists."""
    pass


class TemplateReadFailure(TemplateError):
    """Raised when a located template cannot be read."""
    pass


class TemplateResolver:
    """Resolves logical template names to template source text.

    User templates in ``override_dir`` win over the built-in ones in
    ``builtin_dir``.
    """

    def __init__(self, override_dir: Path, builtin_dir: Path):
        """Initialize template resolver.

        Args:
            override_dir: User template directory (e.g. deploy/base/templates)
            builtin_dir: Built-in template directory shipped with kubegen
        """
        self.override_dir = Path(override_dir)
        self.builtin_dir = Path(builtin_dir)

    @property
    def search_path(self) -> List[Path]:
        return [self.override_dir, self.builtin_dir]

    def _find(self, name: str) -> Optional[Path]:
        for directory in self.search_path:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def exists(self, name: str) -> bool:
        """Check whether a template can be located without reading it."""
        return self._find(name) is not None

    def locate(self, name: str) -> Path:
        """Return the path a template name resolves to.

        Raises:
            TemplateNotFound: If no search directory holds the template
        """
        path = self._find(name)
        if path is None:
            searched = ", ".join(str(d) for d in self.search_path)
            raise TemplateNotFound(f"Template '{name}' not found (searched: {searched})")
        return path

    def resolve(self, name: str) -> str:
        """Load template source text by logical name.

        Args:
            name: Template file name (e.g. ingress-tpl.yaml)

        Returns:
            Template content

        Raises:
            TemplateNotFound: If no search directory holds the template
            TemplateReadFailure: If the located file cannot be read
        """
        path = self.locate(name)
        logger.debug(f"Using template {path}")

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateReadFailure(f"Cannot read template {path}: {e}") from e
