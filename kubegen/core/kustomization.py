"""Textual maintenance of kustomization.yaml resource lists.

Index files have a known, controlled shape::

    resources:
      - ingress.yaml
      - daemon-worker.yaml

so entries are patched in as lines instead of round-tripping the YAML, which
keeps comments and formatting outside the inserted line untouched.
"""
import re
from enum import Enum
from pathlib import Path
from typing import List

from kubegen.core.io import atomic_write_text
from kubegen.core.logger import get_logger

logger = get_logger(__name__)

RESOURCES_HEADER = "resources:"
ENTRY_INDENT = "  - "
ENTRY_PATTERN = re.compile(r"^\s+-\s+(\S.*?)\s*$")


class RegisterResult(Enum):
    """Outcome of registering a resource in an index file."""

    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    HEADER_CREATED = "header_created"
    INDEX_MISSING = "index_missing"
    HEADER_MISSING = "header_missing"
    FAILED = "failed"

    @property
    def changed(self) -> bool:
        return self in (RegisterResult.ADDED, RegisterResult.HEADER_CREATED)


def entry_line(filename: str) -> str:
    """Return the index line that lists filename."""
    return f"{ENTRY_INDENT}{filename}"


def _line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""


def _is_header(line: str) -> bool:
    return line.strip() == RESOURCES_HEADER


def _read_index(index_path: Path) -> str:
    # Decoded from bytes so CRLF line endings reach the patch untouched
    return index_path.read_bytes().decode("utf-8")


class ResourceIndex:
    """Registers generated manifests in kustomization index files."""

    def __init__(self, create_missing_header: bool = False):
        """Initialize the index updater.

        Args:
            create_missing_header: Append a resources: section to index files
                that have none instead of leaving them untouched
        """
        self.create_missing_header = create_missing_header

    def entries(self, index_path: Path) -> List[str]:
        """List the filenames registered under the resources: header."""
        index_path = Path(index_path)
        if not index_path.exists():
            return []

        found: List[str] = []
        in_section = False
        for line in _read_index(index_path).splitlines():
            if _is_header(line):
                in_section = True
                continue
            if not in_section:
                continue
            if not line.strip():
                continue
            match = ENTRY_PATTERN.match(line)
            if not match:
                break
            found.append(match.group(1))
        return found

    def register(self, index_path: Path, filename: str) -> RegisterResult:
        """Add filename to the resources: list of an index file.

        Args:
            index_path: Path to kustomization.yaml
            filename: Resource file name to list

        Returns:
            RegisterResult describing what happened; only FAILED signals an
            I/O problem, the other non-changing results are expected no-ops
        """
        index_path = Path(index_path)
        if not index_path.exists():
            logger.warning(f"Index file {index_path} does not exist, skipping {filename}")
            return RegisterResult.INDEX_MISSING

        try:
            content = _read_index(index_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read index file {index_path}: {e}")
            return RegisterResult.FAILED

        entry = entry_line(filename)
        lines = content.splitlines(keepends=True)
        if any(line.rstrip("\r\n") == entry for line in lines):
            logger.debug(f"{filename} already listed in {index_path}")
            return RegisterResult.ALREADY_PRESENT

        newline = "\r\n" if "\r\n" in content else "\n"
        result = RegisterResult.ADDED

        for position, line in enumerate(lines):
            if _is_header(line):
                if not _line_ending(line):
                    lines[position] = line + newline
                lines.insert(position + 1, entry + newline)
                break
        else:
            if not self.create_missing_header:
                logger.warning(
                    f"No '{RESOURCES_HEADER}' section in {index_path}, {filename} not registered"
                )
                return RegisterResult.HEADER_MISSING

            if lines and not _line_ending(lines[-1]):
                lines[-1] += newline
            lines.extend([RESOURCES_HEADER + newline, entry + newline])
            result = RegisterResult.HEADER_CREATED

        try:
            atomic_write_text(index_path, "".join(lines))
        except OSError as e:
            logger.error(f"Cannot update index file {index_path}: {e}")
            return RegisterResult.FAILED

        logger.info(f"Registered {filename} in {index_path}")
        return result
