import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    CLUSTER_ACCESS_MODES,
    DEFAULT_BACKUP_HOME_NAME,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DBHOST,
    EXIT_USAGE,
)
from .core import MariaDBBackup
from .errors import BackupError
from .errors_catalog import actionable_error
from .models import ClusterSettings, RunConfig
from .services.config_loader import ConfigLoader
from .services.selection import split_names

logger = logging.getLogger("mariadbbackup")


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=True)],
)


class BackupCommand(click.Command):
    """Prints the full usage and exits 1 on any command line error."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            click.echo(ctx.get_help())
            message = actionable_error("unknown_option", detail=exc.format_message())
            click.echo(f"Error: {message}", err=True)
            logger.error(message)
            ctx.exit(EXIT_USAGE)


@click.command(
    cls=BackupCommand,
    context_settings={"help_option_names": ["-h", "--help", "-help"]},
    epilog=(
        "Sample invocations: mariadb-backup; "
        "mariadb-backup --dbhost master01.xxx.yyy --backup-home /backups"
    ),
)
@click.option(
    "--dbhost",
    "-dbhost",
    "dbhost",
    required=False,
    metavar="<hostname|ip_address>",
    help=f"Service name, host name or IP address of the MariaDB server (default: {DEFAULT_DBHOST}).",
)
@click.option(
    "--backup-home",
    "-backup-home",
    "backup_home",
    required=False,
    metavar="<path>",
    help="Backups home directory (default: backups in the current working directory).",
)
@click.option(
    "--dbnames",
    "-dbnames",
    "dbnames",
    required=False,
    metavar="<name_list>",
    help="Quoted, space separated database names to back up (default: all databases).",
)
@click.option(
    "--exclude",
    "-exclude",
    "exclude",
    required=False,
    metavar="<name_list>",
    help="Quoted, space separated database names to leave out of the backup.",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="List the databases that would be backed up without writing anything.",
)
def main(dbhost, backup_home, dbnames, exclude, config, verbose, log_file, dry_run):
    """Back up the databases of an ICP MariaDB service to a timestamped directory.

    The user is assumed to have write permission on the backup home directory
    and a current Kubernetes context with admin credentials.
    """
    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    dbhost = _resolve_option(dbhost, config_values, "dbhost", default=DEFAULT_DBHOST)
    backup_home = _resolve_option(
        backup_home,
        config_values,
        "backup_home",
        default=os.path.join(os.getcwd(), DEFAULT_BACKUP_HOME_NAME),
    )
    dbnames = split_names(_resolve_option(dbnames, config_values, "dbnames"))
    exclude = split_names(_resolve_option(exclude, config_values, "exclude"))
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    access_mode = _resolve_option(None, config_values, "cluster_access", default="auto")
    if access_mode not in CLUSTER_ACCESS_MODES:
        raise click.ClickException(
            f"Invalid cluster_access '{access_mode}'. Use one of: {', '.join(CLUSTER_ACCESS_MODES)}."
        )

    defaults = ClusterSettings()
    cluster_settings = ClusterSettings(
        access_mode=access_mode,
        namespace=_resolve_option(None, config_values, "namespace", defaults.namespace),
        credentials_secret=_resolve_option(
            None, config_values, "credentials_secret", defaults.credentials_secret
        ),
        username_key=_resolve_option(None, config_values, "username_key", defaults.username_key),
        password_key=_resolve_option(None, config_values, "password_key", defaults.password_key),
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(filename)s:%(lineno)d %(message)s")
        )
        logger.addHandler(file_handler)

    run_config = RunConfig(
        backup_home=str(backup_home),
        dbhost=str(dbhost),
        include_names=tuple(dbnames),
        exclude_names=tuple(exclude),
    )

    try:
        backup = MariaDBBackup(
            run_config=run_config,
            cluster_settings=cluster_settings,
            dry_run=dry_run,
            mysql_command=_resolve_option(None, config_values, "mysql_command", "mysql"),
            mysqldump_command=_resolve_option(
                None, config_values, "mysqldump_command", "mysqldump"
            ),
        )
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(backup.run())


if __name__ == "__main__":
    main()
