import pytest

from mariadbbackup.constants import EXIT_EMPTY_PASSWORD, EXIT_EMPTY_USERNAME
from mariadbbackup.errors import BackupError
from mariadbbackup.models import ClusterSettings
from mariadbbackup.services.credentials import CredentialResolver


class DummyLogger:
    def __init__(self):
        self.messages = []

    def info(self, message, *args, **_kwargs):
        self.messages.append(message % args)


class FakeClusterClient:
    def __init__(self, values):
        self.values = values
        self.calls = []

    def get_secret_value(self, namespace, name, key):
        self.calls.append((namespace, name, key))
        value = self.values.get(key, "")
        if isinstance(value, Exception):
            raise value
        return value


def _resolver(values, logger=None):
    return CredentialResolver(
        cluster_client=FakeClusterClient(values),
        cluster_settings=ClusterSettings(),
        logger=logger or DummyLogger(),
    )


def test_resolve_returns_credentials_without_logging_password():
    logger = DummyLogger()
    resolver = _resolver({"OAUTH2DB_USER": "admin", "OAUTH2DB_PASSWORD": "s3cret"}, logger)

    credentials = resolver.resolve()

    assert credentials.username == "admin"
    assert credentials.password == "s3cret"
    assert "s3cret" not in repr(credentials)
    assert not any("s3cret" in message for message in logger.messages)


def test_resolve_fails_with_exit_code_for_empty_username():
    resolver = _resolver({"OAUTH2DB_PASSWORD": "s3cret"})

    with pytest.raises(BackupError, match="MariaDB user") as exc_info:
        resolver.resolve()

    assert exc_info.value.exit_code == EXIT_EMPTY_USERNAME


def test_resolve_fails_with_exit_code_for_empty_password():
    resolver = _resolver({"OAUTH2DB_USER": "admin"})

    with pytest.raises(BackupError, match="MariaDB password") as exc_info:
        resolver.resolve()

    assert exc_info.value.exit_code == EXIT_EMPTY_PASSWORD


def test_resolve_maps_lookup_errors_to_password_exit_code():
    resolver = _resolver(
        {"OAUTH2DB_USER": "admin", "OAUTH2DB_PASSWORD": BackupError("kubectl failed")}
    )

    with pytest.raises(BackupError, match="kubectl failed") as exc_info:
        resolver.resolve()

    assert exc_info.value.exit_code == EXIT_EMPTY_PASSWORD


def test_lookups_are_cached_per_key():
    client = FakeClusterClient({"OAUTH2DB_USER": "admin", "OAUTH2DB_PASSWORD": "s3cret"})
    resolver = CredentialResolver(client, ClusterSettings(), DummyLogger())

    resolver.resolve()
    resolver.resolve()

    assert len(client.calls) == 2
    assert client.calls[0] == ("kube-system", "platform-mariadb-credentials", "OAUTH2DB_USER")
