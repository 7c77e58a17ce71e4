"""File access for configuration files in a single base directory."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileService:
    """Reads and writes files by bare name inside ``directory``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).expanduser().resolve()
        logger.info("Using configuration directory %s", self.directory)

    def path(self, file_name: str) -> Path:
        return self.directory / file_name

    def exists(self, file_name: str) -> bool:
        return self.path(file_name).is_file()

    def read_text(self, file_name: str) -> str:
        """Raises ``FileNotFoundError`` if ``file_name`` does not exist."""
        return self.path(file_name).read_text(encoding="utf-8")

    def write_text(self, file_name: str, content: str, overwrite: bool = False) -> Path:
        """Write ``content``; raises ``FileExistsError`` unless ``overwrite``."""
        target = self.path(file_name)
        target.parent.mkdir(parents=True, exist_ok=True)
        mode = "w" if overwrite else "x"
        with target.open(mode, encoding="utf-8") as fh:
            fh.write(content)
        return target
