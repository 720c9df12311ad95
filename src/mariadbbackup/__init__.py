"""
mariadb-backup - ICP MariaDB database backup tool
"""

__version__ = "1.0.0"

from .core import MariaDBBackup, BackupError

__all__ = ["MariaDBBackup", "BackupError"]
