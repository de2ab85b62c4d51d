"""
filesystem.py - Local filesystem helper bound as 'files'
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, List, Union
import glob as _glob
import json
import logging
import shutil

logger = logging.getLogger("filesystem")

PathLike = Union[str, Path]


class Filesystem:
    """Thin wrapper over pathlib used by the view and translation subsystems."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def missing(self, path: PathLike) -> bool:
        return not self.exists(path)

    def is_file(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def is_directory(self, path: PathLike) -> bool:
        return Path(path).is_dir()

    def get(self, path: PathLike, encoding: str = "utf-8") -> str:
        """
        Read a file.

        Raises:
            FileNotFoundError: If path is not a file
        """
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(f"File does not exist at path {p}")
        return p.read_text(encoding=encoding)

    def require_json(self, path: PathLike) -> Any:
        """Read and decode a JSON file."""
        return json.loads(self.get(path))

    def put(self, path: PathLike, contents: str, encoding: str = "utf-8") -> int:
        """Write contents, replacing the file. Returns characters written."""
        return Path(path).write_text(contents, encoding=encoding)

    def append(self, path: PathLike, contents: str, encoding: str = "utf-8") -> int:
        with open(path, "a", encoding=encoding) as f:
            return f.write(contents)

    def delete(self, *paths: PathLike) -> bool:
        """Delete files. Returns False if any could not be removed."""
        success = True
        for path in paths:
            try:
                Path(path).unlink()
            except OSError as e:
                logger.debug(f"Could not delete {path}: {e}")
                success = False
        return success

    def make_directory(self, path: PathLike, parents: bool = True, exist_ok: bool = True) -> None:
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)

    def ensure_directory_exists(self, path: PathLike) -> None:
        p = Path(path)
        if not p.is_dir():
            p.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created directory: {p}")

    def delete_directory(self, path: PathLike) -> bool:
        p = Path(path)
        if not p.is_dir():
            return False
        shutil.rmtree(p)
        return True

    def files(self, directory: PathLike) -> List[Path]:
        """List regular files directly inside directory, sorted by name."""
        p = Path(directory)
        if not p.is_dir():
            return []
        return sorted(child for child in p.iterdir() if child.is_file())

    def glob(self, pattern: str) -> List[str]:
        return sorted(_glob.glob(pattern))

    def last_modified(self, path: PathLike) -> float:
        return Path(path).stat().st_mtime
