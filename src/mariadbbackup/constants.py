"""Defaults and exit codes shared across mariadb-backup."""

DEFAULT_DBHOST = "mariadb.kube-system"
DEFAULT_BACKUP_HOME_NAME = "backups"
DEFAULT_CONFIG_FILE = ".mariadb-backup.yml"

BACKUP_DIR_PREFIX = "icp-mariadb-backup-"
TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"
DUMP_FILE_SUFFIX = ".sql"
ALL_NAMES_FILE = "all-database-names.txt"
SELECTED_NAMES_FILE = "backup-database-names.txt"
MANIFEST_FILE = "backup-manifest.json"

# Server-internal schemas that mysqldump cannot export meaningfully.
SYSTEM_DATABASES = ("information_schema", "performance_schema")

DEFAULT_NAMESPACE = "kube-system"
DEFAULT_CREDENTIALS_SECRET = "platform-mariadb-credentials"
DEFAULT_USERNAME_KEY = "OAUTH2DB_USER"
DEFAULT_PASSWORD_KEY = "OAUTH2DB_PASSWORD"
CLUSTER_ACCESS_MODES = ("auto", "kubectl", "in-cluster")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 1
EXIT_EMPTY_DATABASE_LIST = 3
EXIT_INVALID_DATABASE_NAMES = 4
EXIT_BACKUP_DIR = 5
EXIT_EMPTY_USERNAME = 6
EXIT_EMPTY_PASSWORD = 7
EXIT_DUMP_FAILED = 8
