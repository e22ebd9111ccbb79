"""File lookup over an ordered list of include directories"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from themeloader.exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class TemplateFile:
    """A located template resource."""

    path: Path  # absolute
    relative_path: str  # relative to the include directory holding it

    @property
    def absolute_path(self) -> str:
        return str(self.path)

    @property
    def modification_time(self) -> float:
        return self.path.stat().st_mtime

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")


class FileBrowser:
    """Looks up files relative to a set of include directories.

    Include directories are consulted in order; the first one holding a
    file wins. Listing returns matches from every include directory so
    callers can merge them.
    """

    def __init__(self, include_dirs: Iterable[str | Path]):
        self.include_dirs = [Path(d).resolve() for d in include_dirs]
        if not self.include_dirs:
            raise InvalidConfigurationError("At least one include directory is required")

    def find(self, path: str) -> TemplateFile | None:
        """Find the first include directory holding a regular file at path"""
        for root in self.include_dirs:
            candidate = root / path
            if candidate.is_file():
                return TemplateFile(path=candidate, relative_path=path)
        return None

    def list_directories(self, path: str) -> list[Path]:
        """All include directories' path that exist as directories"""
        return [root / path for root in self.include_dirs if (root / path).is_dir()]

    def relativize(self, file: Path, include_dir: Path | None = None) -> str:
        """POSIX path of file relative to the include directory holding it.

        With nested include directories pass include_dir, the one the file
        was listed from; otherwise the first include directory holding it is used.
        """
        file = Path(file)
        if include_dir is not None:
            return file.relative_to(include_dir).as_posix()
        for root in self.include_dirs:
            try:
                return file.relative_to(root).as_posix()
            except ValueError:
                continue
        raise ValueError(f"{file} is not inside any include directory")
