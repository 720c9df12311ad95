"""Shared domain models for mariadb-backup."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from mariadbbackup.constants import (
    DEFAULT_CREDENTIALS_SECRET,
    DEFAULT_NAMESPACE,
    DEFAULT_PASSWORD_KEY,
    DEFAULT_USERNAME_KEY,
)


@dataclass(frozen=True)
class RunConfig:
    """Command line input for one backup run. Empty include_names means all databases."""

    backup_home: str
    dbhost: str
    include_names: Tuple[str, ...] = ()
    exclude_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ClusterSettings:
    """Where the MariaDB service credentials live in the cluster."""

    access_mode: str = "auto"
    namespace: str = DEFAULT_NAMESPACE
    credentials_secret: str = DEFAULT_CREDENTIALS_SECRET
    username_key: str = DEFAULT_USERNAME_KEY
    password_key: str = DEFAULT_PASSWORD_KEY


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class BackupRun:
    timestamp: str
    backup_dir: str


@dataclass(frozen=True)
class BackupArtifact:
    """Outcome of dumping one database."""

    database: str
    path: str
    status: str
    returncode: Optional[int] = None
    size_bytes: int = 0
    duration_seconds: float = 0.0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"
