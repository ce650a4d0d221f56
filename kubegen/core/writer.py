"""Persist rendered manifests to the deploy tree."""
from pathlib import Path
from typing import Any, Mapping, Optional

from kubegen.core.io import atomic_write_text
from kubegen.core.logger import get_logger
from kubegen.core.renderer import TemplateRenderer

logger = get_logger(__name__)


class ManifestWriter:
    """Renders templates and writes the result, overwriting existing files.

    Failures are reported as ``False`` so a batch of manifests can keep going.
    """

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self.renderer = renderer or TemplateRenderer()

    def write(self, template: str, variables: Mapping[str, Any], destination: Path) -> bool:
        """Render a template and write it to destination.

        Args:
            template: Template source text
            variables: Template variables
            destination: Output file path (parent directories are created)

        Returns:
            True if the file was written
        """
        return self.write_text(self.renderer.render(template, variables), destination)

    def write_text(self, text: str, destination: Path) -> bool:
        """Write already rendered text to destination."""
        destination = Path(destination)
        try:
            atomic_write_text(destination, text)
        except OSError as e:
            logger.error(f"Failed to write {destination}: {e}")
            return False

        logger.debug(f"Wrote {destination}")
        return True
