import pytest

from mariadbbackup.constants import EXIT_BACKUP_DIR
from mariadbbackup.errors import BackupError
from mariadbbackup.services.filesystem import FileSystemService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def _service():
    return FileSystemService(logger=DummyLogger(), console=DummyConsole())


def test_create_backup_dir_creates_missing_parents(tmp_path):
    target = tmp_path / "home" / "nested" / "icp-mariadb-backup-2024-01-01-00-00-00"

    _service().create_backup_dir(str(target))

    assert target.is_dir()


def test_create_backup_dir_rejects_non_empty_directory(tmp_path):
    target = tmp_path / "icp-mariadb-backup-2024-01-01-00-00-00"
    target.mkdir()
    (target / "old.sql").write_text("", encoding="utf-8")

    with pytest.raises(BackupError, match="not empty") as exc_info:
        _service().create_backup_dir(str(target))

    assert exc_info.value.exit_code == EXIT_BACKUP_DIR


def test_create_backup_dir_reports_failure_with_exit_code(tmp_path):
    blocker = tmp_path / "backups"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(BackupError, match="Failed to create backup directory") as exc_info:
        _service().create_backup_dir(str(blocker / "icp-mariadb-backup-2024-01-01-00-00-00"))

    assert exc_info.value.exit_code == EXIT_BACKUP_DIR


def test_write_name_list_writes_one_name_per_line(tmp_path):
    path = tmp_path / "all-database-names.txt"

    _service().write_name_list(str(path), ["a", "b", "c"])

    assert path.read_text(encoding="utf-8") == "a\nb\nc\n"
