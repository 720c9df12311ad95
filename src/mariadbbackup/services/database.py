"""MariaDB client services: database listing and per-database dumps."""

import os
import time
from typing import List

from mariadbbackup.constants import DUMP_FILE_SUFFIX, SYSTEM_DATABASES
from mariadbbackup.errors import BackupError
from mariadbbackup.models import BackupArtifact, Credentials


class DatabaseService:
    """Wraps the mysql and mysqldump command line clients."""

    def __init__(
        self,
        command_runner,
        logger,
        console,
        mysql_command: str = "mysql",
        mysqldump_command: str = "mysqldump",
    ):
        self.command_runner = command_runner
        self.logger = logger
        self.console = console
        self.mysql_command = mysql_command
        self.mysqldump_command = mysqldump_command

    @staticmethod
    def _password_env(credentials: Credentials):
        # MYSQL_PWD keeps the password out of the process list and the debug log.
        return {"MYSQL_PWD": credentials.password}

    @staticmethod
    def parse_database_names(output: str) -> List[str]:
        names = []
        for line in output.splitlines():
            name = line.strip()
            if name and name not in SYSTEM_DATABASES:
                names.append(name)
        return names

    def list_databases(self, host: str, credentials: Credentials) -> List[str]:
        result = self.command_runner.run(
            [
                self.mysql_command,
                f"--host={host}",
                f"--user={credentials.username}",
                "--batch",
                "--skip-column-names",
                "--execute",
                "SHOW DATABASES",
            ],
            check=True,
            capture_output=True,
            env=self._password_env(credentials),
        )
        return self.parse_database_names(result.stdout or "")

    @staticmethod
    def backup_file_path(backup_dir: str, database: str) -> str:
        return os.path.join(backup_dir, f"{database}{DUMP_FILE_SUFFIX}")

    def build_dump_command(self, host: str, username: str, database: str) -> List[str]:
        return [
            self.mysqldump_command,
            f"--host={host}",
            f"--user={username}",
            "--single-transaction",
            "--skip-dump-date",
            database,
        ]

    def dump_database(
        self,
        database: str,
        host: str,
        credentials: Credentials,
        backup_dir: str,
    ) -> BackupArtifact:
        """Dumps one database to its file in ``backup_dir``. Failures are returned, not raised."""
        path = self.backup_file_path(backup_dir, database)
        self.logger.info("Backing up %s to %s...", database, path)
        self.console.print(f"[blue]Backing up {database}...[/blue]")

        started = time.monotonic()
        returncode = None
        error = None
        try:
            with open(path, "w", encoding="utf-8") as file_obj:
                result = self.command_runner.run(
                    self.build_dump_command(host, credentials.username, database),
                    check=False,
                    stdout=file_obj,
                    env=self._password_env(credentials),
                    warn_on_failure=False,
                )
            returncode = result.returncode
            if returncode != 0:
                stderr = (result.stderr or "").strip()
                error = f"mysqldump exited with status {returncode}"
                if stderr:
                    error = f"{error}: {stderr}"
        except (BackupError, OSError) as exc:
            error = str(exc)
        duration = time.monotonic() - started

        size_bytes = os.path.getsize(path) if os.path.exists(path) else 0

        if error:
            self.logger.error("%s back-up failed. %s", database, error)
            self.console.print(f"[bold red]{database} back-up failed.[/bold red]")
            status = "failed"
        else:
            self.logger.info("%s back-up completed.", database)
            self.console.print(f"[green]{database} back-up completed.[/green]")
            status = "success"

        return BackupArtifact(
            database=database,
            path=path,
            status=status,
            returncode=returncode,
            size_bytes=size_bytes,
            duration_seconds=round(duration, 3),
            error=error,
        )
