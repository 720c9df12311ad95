"""Actionable error catalog for mariadb-backup."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "unknown_option": {
        "what": "Unknown option in command line: {detail}",
        "next": "Run with `--help` to list the supported options.",
    },
    "database_list_unavailable": {
        "what": "Could not list the MariaDB databases on {host}: {detail}",
        "next": "Check that `--dbhost` is reachable and the mysql client is installed.",
    },
    "empty_database_list": {
        "what": "MariaDB database name list for {host} must not be empty.",
        "next": "Check that `--dbhost` points at the ICP MariaDB service.",
    },
    "invalid_database_names": {
        "what": "Not valid ICP MariaDB database name(s): {names}.",
        "next": "Choose `--dbnames` from the valid names: {valid}.",
    },
    "backup_dir_failed": {
        "what": "Failed to create backup directory {path}: {detail}",
        "next": "Check that you have write permission on the backup home directory.",
    },
    "backup_dir_not_empty": {
        "what": "Backup directory {path} already exists and is not empty.",
        "next": "Wait a second and retry, or choose another `--backup-home`.",
    },
    "empty_username": {
        "what": "Failed to get the MariaDB user from secret {secret} in namespace {namespace}.",
        "next": "Check the `credentials_secret` and `username_key` configuration values.",
    },
    "empty_password": {
        "what": "Failed to get the MariaDB password from secret {secret} in namespace {namespace}.",
        "next": "Check the `credentials_secret` and `password_key` configuration values.",
    },
    "dumps_failed": {
        "what": "Backup failed for {count} database(s): {names}.",
        "next": "Inspect the log output and `backup-manifest.json` in {path}.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
