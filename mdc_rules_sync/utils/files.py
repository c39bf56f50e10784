"""Contains utility functions for writing local files."""

import os
from pathlib import Path
from tempfile import NamedTemporaryFile


def write_bytes_atomically(path: Path, data: bytes) -> None:
    """Replace the content of path with data in a single step.

    The data goes to a temporary file in the same directory first, so readers
    see either the old content or the new one, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile(mode="wb", dir=str(path.parent), prefix=f".{path.name}.", delete=False) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def write_text_atomically(path: Path, content: str) -> None:
    """Write UTF-8 text to path without ever leaving it partially written."""
    write_bytes_atomically(path, content.encode("utf-8"))
