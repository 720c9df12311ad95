"""Domain errors for mariadb-backup."""

from mariadbbackup.constants import EXIT_FAILURE


class BackupError(RuntimeError):
    """Raised when the backup cannot continue safely."""

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE):
        super().__init__(message)
        self.exit_code = exit_code
