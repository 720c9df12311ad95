import logging
import os
from datetime import datetime
from typing import Callable, List, Optional

from rich.console import Console

from .constants import (
    ALL_NAMES_FILE,
    BACKUP_DIR_PREFIX,
    EXIT_DUMP_FAILED,
    EXIT_EMPTY_DATABASE_LIST,
    EXIT_FAILURE,
    EXIT_OK,
    MANIFEST_FILE,
    SELECTED_NAMES_FILE,
    TIMESTAMP_FORMAT,
)
from .errors import BackupError
from .errors_catalog import actionable_error
from .models import BackupArtifact, BackupRun, ClusterSettings, Credentials, RunConfig
from .services.cluster import build_cluster_client
from .services.command_runner import CommandRunner
from .services.credentials import CredentialResolver
from .services.database import DatabaseService
from .services.filesystem import FileSystemService
from .services.manifest import ManifestService
from .services.selection import select_databases

console = Console()
logger = logging.getLogger("mariadbbackup")


class MariaDBBackup:
    """Backs up the selected databases of one MariaDB host into a timestamped directory."""

    def __init__(
        self,
        run_config: RunConfig,
        cluster_settings: Optional[ClusterSettings] = None,
        dry_run: bool = False,
        mysql_command: str = "mysql",
        mysqldump_command: str = "mysqldump",
        command_runner: Optional[CommandRunner] = None,
        cluster_client=None,
        database_service: Optional[DatabaseService] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.run_config = run_config
        self.cluster_settings = cluster_settings or ClusterSettings()
        self.dry_run = dry_run
        self.clock = clock or datetime.now

        self.command_runner = command_runner or CommandRunner(logger=logger)
        self.cluster_client = cluster_client or build_cluster_client(
            self.cluster_settings.access_mode,
            command_runner=self.command_runner,
            logger=logger,
        )
        self.credential_resolver = CredentialResolver(
            cluster_client=self.cluster_client,
            cluster_settings=self.cluster_settings,
            logger=logger,
        )
        self.database_service = database_service or DatabaseService(
            command_runner=self.command_runner,
            logger=logger,
            console=console,
            mysql_command=mysql_command,
            mysqldump_command=mysqldump_command,
        )
        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.manifest_service: Optional[ManifestService] = None

    def discover_databases(self, credentials: Credentials) -> List[str]:
        host = self.run_config.dbhost
        logger.info("MariaDB host: %s", host)
        try:
            all_databases = self.database_service.list_databases(host, credentials)
        except BackupError as exc:
            raise BackupError(
                actionable_error("database_list_unavailable", host=host, detail=str(exc)),
                exit_code=EXIT_EMPTY_DATABASE_LIST,
            ) from exc

        if not all_databases:
            raise BackupError(
                actionable_error("empty_database_list", host=host),
                exit_code=EXIT_EMPTY_DATABASE_LIST,
            )
        logger.info("MariaDB databases on %s: %s", host, " ".join(all_databases))
        return all_databases

    def select_databases(self, all_databases: List[str]) -> List[str]:
        if self.run_config.exclude_names:
            logger.info(
                "Excluding: %s, from the list of databases to be backed up.",
                " ".join(self.run_config.exclude_names),
            )
        selection = select_databases(
            all_databases,
            include_names=self.run_config.include_names,
            exclude_names=self.run_config.exclude_names,
        )
        logger.info("Databases to be backed up: %s", " ".join(selection))
        return selection

    def make_backup_run(self) -> BackupRun:
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        backup_dir = os.path.join(self.run_config.backup_home, f"{BACKUP_DIR_PREFIX}{timestamp}")
        return BackupRun(timestamp=timestamp, backup_dir=backup_dir)

    def create_backup_run(self) -> BackupRun:
        backup_run = self.make_backup_run()
        self.filesystem_service.create_backup_dir(backup_run.backup_dir)
        logger.info("Backups will be written to: %s", backup_run.backup_dir)
        return backup_run

    def write_name_lists(self, backup_run: BackupRun, all_databases: List[str], selection: List[str]):
        self.filesystem_service.write_name_list(
            os.path.join(backup_run.backup_dir, ALL_NAMES_FILE), all_databases
        )
        self.filesystem_service.write_name_list(
            os.path.join(backup_run.backup_dir, SELECTED_NAMES_FILE), selection
        )

    def dump_databases(
        self,
        backup_run: BackupRun,
        selection: List[str],
        credentials: Credentials,
    ) -> List[BackupArtifact]:
        artifacts = []
        for database in selection:
            artifact = self.database_service.dump_database(
                database=database,
                host=self.run_config.dbhost,
                credentials=credentials,
                backup_dir=backup_run.backup_dir,
            )
            if self.manifest_service:
                self.manifest_service.add_artifact(artifact)
            artifacts.append(artifact)
        return artifacts

    def _report_failures(self, backup_run: BackupRun, artifacts: List[BackupArtifact]):
        failed = [artifact.database for artifact in artifacts if not artifact.succeeded]
        if failed:
            raise BackupError(
                actionable_error(
                    "dumps_failed",
                    count=str(len(failed)),
                    names=" ".join(failed),
                    path=backup_run.backup_dir,
                ),
                exit_code=EXIT_DUMP_FAILED,
            )

    def run(self) -> int:
        manifest_status = "failed"
        manifest_error: Optional[str] = None

        try:
            logger.info("BEGIN mariadb-backup")
            logger.info("Backup directory will be created in: %s", self.run_config.backup_home)

            credentials = self.credential_resolver.resolve()
            all_databases = self.discover_databases(credentials)
            selection = self.select_databases(all_databases)

            if self.dry_run:
                backup_run = self.make_backup_run()
                console.print(
                    f"[yellow]Dry run:[/yellow] would back up {len(selection)} database(s) "
                    f"to {backup_run.backup_dir}"
                )
                for database in selection:
                    console.print(f"  - {database}")
                logger.info("END mariadb-backup (dry run)")
                return EXIT_OK

            backup_run = self.create_backup_run()
            self.manifest_service = ManifestService(
                manifest_file=os.path.join(backup_run.backup_dir, MANIFEST_FILE),
                logger=logger,
            )
            self.manifest_service.start_run(
                timestamp=backup_run.timestamp,
                metadata={
                    "dbhost": self.run_config.dbhost,
                    "backup_home": self.run_config.backup_home,
                    "all_databases": list(all_databases),
                    "selected_databases": list(selection),
                },
            )
            self.write_name_lists(backup_run, all_databases, selection)

            artifacts = self.dump_databases(backup_run, selection, credentials)
            self._report_failures(backup_run, artifacts)

            console.print(
                f"[bold green]Backed up {len(artifacts)} database(s) to {backup_run.backup_dir}[/bold green]"
            )
            manifest_status = "success"
            logger.info("END mariadb-backup")
            return EXIT_OK

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            manifest_status = "aborted"
            manifest_error = "Operation cancelled by user."
            return EXIT_FAILURE
        except BackupError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            manifest_status = "partial" if exc.exit_code == EXIT_DUMP_FAILED else "failed"
            manifest_error = str(exc)
            return exc.exit_code
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            manifest_error = str(exc)
            return EXIT_FAILURE
        finally:
            if self.manifest_service:
                self.manifest_service.finalize(manifest_status, error=manifest_error)
