"""Configuration loader for mariadb-backup."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from mariadbbackup.errors import BackupError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "dbhost",
        "backup_home",
        "dbnames",
        "exclude",
        "verbose",
        "log_file",
        "dry_run",
        "cluster_access",
        "namespace",
        "credentials_secret",
        "username_key",
        "password_key",
        "mysql_command",
        "mysqldump_command",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BackupError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BackupError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BackupError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise BackupError(f"Unknown configuration keys: {unknown_list}")

        for key in ("dbnames", "exclude"):
            value = parsed.get(key)
            if value is not None and not isinstance(value, (str, list)):
                raise BackupError(f"Config key '{key}' must be a string or a list of names.")

        return parsed
