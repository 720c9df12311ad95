"""MariaDB service credential lookups."""

from typing import Dict

from mariadbbackup.constants import EXIT_EMPTY_PASSWORD, EXIT_EMPTY_USERNAME
from mariadbbackup.errors import BackupError
from mariadbbackup.errors_catalog import actionable_error
from mariadbbackup.models import ClusterSettings, Credentials


class CredentialResolver:
    """Resolves the MariaDB user and password from the cluster credentials secret."""

    def __init__(self, cluster_client, cluster_settings: ClusterSettings, logger):
        self.cluster_client = cluster_client
        self.settings = cluster_settings
        self.logger = logger
        self._cache: Dict[str, str] = {}

    def _lookup(self, key: str) -> str:
        if key not in self._cache:
            self._cache[key] = self.cluster_client.get_secret_value(
                self.settings.namespace,
                self.settings.credentials_secret,
                key,
            )
        return self._cache[key]

    def lookup_username(self) -> str:
        return self._lookup(self.settings.username_key)

    def lookup_password(self) -> str:
        return self._lookup(self.settings.password_key)

    def _error(self, code: str) -> str:
        return actionable_error(
            code,
            secret=self.settings.credentials_secret,
            namespace=self.settings.namespace,
        )

    def resolve(self) -> Credentials:
        try:
            username = self.lookup_username()
        except BackupError as exc:
            raise BackupError(
                f"{self._error('empty_username')} ({exc})", exit_code=EXIT_EMPTY_USERNAME
            ) from exc
        if not username:
            raise BackupError(self._error("empty_username"), exit_code=EXIT_EMPTY_USERNAME)
        self.logger.info("MariaDB user: %s", username)

        try:
            password = self.lookup_password()
        except BackupError as exc:
            raise BackupError(
                f"{self._error('empty_password')} ({exc})", exit_code=EXIT_EMPTY_PASSWORD
            ) from exc
        if not password:
            raise BackupError(self._error("empty_password"), exit_code=EXIT_EMPTY_PASSWORD)

        return Credentials(username=username, password=password)
