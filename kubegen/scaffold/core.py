"""Core scaffolding functionality for deploy trees."""
import os
import shutil
from pathlib import Path
from typing import Any, List, Mapping, Optional

from kubegen.core.logger import get_logger
from kubegen.core.writer import ManifestWriter

logger = get_logger(__name__)


class ScaffoldSourceMissing(Exception):
    """Raised when the built-in template tree is absent (broken installation)."""
    pass


class ScaffoldManager:
    """Copies template trees into a deploy directory without clobbering edits."""

    def __init__(self, writer: Optional[ManifestWriter] = None):
        self.writer = writer or ManifestWriter()

    def seed(self, source_dir: Path, target_dir: Path) -> List[Path]:
        """Recursively copy source_dir into target_dir.

        Directories are created as needed. Files are copied only when nothing
        exists at the target path, so user customizations survive re-runs.

        Args:
            source_dir: Template tree to copy from
            target_dir: Directory to populate

        Returns:
            Target paths of the files that were copied

        Raises:
            ScaffoldSourceMissing: If source_dir does not exist
        """
        source_dir = Path(source_dir)
        target_dir = Path(target_dir)

        if not source_dir.is_dir():
            raise ScaffoldSourceMissing(f"Template directory not found: {source_dir}")

        target_dir.mkdir(parents=True, exist_ok=True)
        copied: List[Path] = []

        for current, dirnames, filenames in os.walk(source_dir):
            dirnames.sort()
            relative = Path(current).relative_to(source_dir)

            for dirname in dirnames:
                (target_dir / relative / dirname).mkdir(parents=True, exist_ok=True)

            for filename in sorted(filenames):
                target = target_dir / relative / filename
                if target.exists():
                    logger.debug(f"Keeping existing {target}")
                    continue
                shutil.copy2(Path(current) / filename, target)
                copied.append(target)

        logger.info(f"📁 Seeded {target_dir} ({len(copied)} new file(s))")
        return copied

    def render_in_place(self, path: Path, variables: Mapping[str, Any]) -> bool:
        """Render a seeded file with variables and write it back.

        Returns:
            False if the file is missing or could not be rewritten
        """
        path = Path(path)
        if not path.exists():
            return False
        return self.writer.write(path.read_bytes().decode("utf-8"), variables, path)
