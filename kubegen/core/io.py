"""File I/O helpers shared by the manifest writer and index updater."""
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

DEFAULT_MODE = 0o644


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path."""
    path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, mode: Optional[int] = None) -> None:
    """Write text to a file atomically using a temporary file.

    The temporary file lives in the destination directory so the final
    os.replace never crosses a filesystem boundary. A symlinked destination
    is written through to its target.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal); defaults to the existing file's
            mode, or 0o644 for a new file
    """
    path = Path(path)
    if path.is_symlink():
        path = path.resolve()
    ensure_parent(path)

    if mode is None:
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else DEFAULT_MODE

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
