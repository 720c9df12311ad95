import pytest
from click.testing import CliRunner

import mariadbbackup.cli as cli_module


@pytest.fixture
def captured(monkeypatch):
    captured = {}

    class FakeBackup:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def run(self):
            return 0

    monkeypatch.setattr(cli_module, "MariaDBBackup", FakeBackup)
    return captured


def test_cli_applies_defaults(tmp_path, monkeypatch, captured):
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    run_config = captured["run_config"]
    assert run_config.dbhost == "mariadb.kube-system"
    assert run_config.backup_home == str(tmp_path / "backups")
    assert run_config.include_names == ()
    assert run_config.exclude_names == ()
    assert captured["dry_run"] is False


def test_cli_splits_quoted_name_lists_and_accepts_single_dash(tmp_path, monkeypatch, captured):
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(
        cli_module.main,
        [
            "-dbhost",
            "master01.example.com",
            "--backup-home",
            "/backups",
            "--dbnames",
            "platform-db security-data",
            "-exclude",
            "metering",
        ],
    )

    assert result.exit_code == 0
    run_config = captured["run_config"]
    assert run_config.dbhost == "master01.example.com"
    assert run_config.backup_home == "/backups"
    assert run_config.include_names == ("platform-db", "security-data")
    assert run_config.exclude_names == ("metering",)


@pytest.mark.parametrize("flag", ["--help", "-h", "-help"])
def test_cli_help_exits_successfully(flag, captured):
    result = CliRunner().invoke(cli_module.main, [flag])

    assert result.exit_code == 0
    assert "--dbnames" in result.output
    assert captured == {}


def test_cli_unknown_option_prints_usage_and_exits_1(tmp_path, monkeypatch, captured):
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["--foo", "bar"])

    assert result.exit_code == 1
    assert "Usage:" in result.output
    assert "--foo" in result.output
    assert captured == {}
    assert not (tmp_path / "backups").exists()


def test_cli_uses_config_and_allows_cli_override(tmp_path, monkeypatch, captured):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "backup.yml"
    config_file.write_text(
        "dbhost: config-host\n"
        "dbnames: [a, b]\n"
        "namespace: services\n"
        "credentials_secret: mariadb-secret\n"
        "cluster_access: kubectl\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(
        cli_module.main,
        ["--config", str(config_file), "--dbhost", "cli-host", "--dry-run"],
    )

    assert result.exit_code == 0
    assert captured["run_config"].dbhost == "cli-host"
    assert captured["run_config"].include_names == ("a", "b")
    assert captured["cluster_settings"].namespace == "services"
    assert captured["cluster_settings"].credentials_secret == "mariadb-secret"
    assert captured["cluster_settings"].access_mode == "kubectl"
    assert captured["dry_run"] is True


def test_cli_uses_default_config_file_when_present(tmp_path, monkeypatch, captured):
    (tmp_path / ".mariadb-backup.yml").write_text("exclude: metering\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert captured["run_config"].exclude_names == ("metering",)


def test_cli_rejects_invalid_cluster_access(tmp_path, monkeypatch, captured):
    (tmp_path / ".mariadb-backup.yml").write_text("cluster_access: ssh\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1
    assert "Invalid cluster_access" in result.output


def test_cli_propagates_backup_exit_code(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    class FailingBackup:
        def __init__(self, **_kwargs):
            pass

        def run(self):
            return 4

    monkeypatch.setattr(cli_module, "MariaDBBackup", FailingBackup)

    result = CliRunner().invoke(cli_module.main, ["--dbnames", "x"])

    assert result.exit_code == 4
