"""Filesystem helpers for mariadb-backup."""

import logging
import os
from typing import Iterable

from rich.console import Console

from mariadbbackup.constants import EXIT_BACKUP_DIR
from mariadbbackup.errors import BackupError
from mariadbbackup.errors_catalog import actionable_error


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def create_backup_dir(self, path: str):
        self.logger.info("Creating backup directory: %s", path)
        try:
            os.makedirs(path, exist_ok=True)
            existing = os.listdir(path)
        except OSError as exc:
            raise BackupError(
                actionable_error("backup_dir_failed", path=path, detail=str(exc)),
                exit_code=EXIT_BACKUP_DIR,
            ) from exc

        if existing:
            raise BackupError(
                actionable_error("backup_dir_not_empty", path=path),
                exit_code=EXIT_BACKUP_DIR,
            )

    def write_name_list(self, path: str, names: Iterable[str]):
        with open(path, "w", encoding="utf-8") as file_obj:
            for name in names:
                file_obj.write(f"{name}\n")
        self.logger.debug("Wrote database names to %s", path)
