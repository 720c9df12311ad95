"""Database selection: inclusion and exclusion name lists."""

from typing import Iterable, List, Sequence

from mariadbbackup.constants import EXIT_INVALID_DATABASE_NAMES
from mariadbbackup.errors import BackupError
from mariadbbackup.errors_catalog import actionable_error


def split_names(value) -> List[str]:
    """Splits a quoted, whitespace separated name list. Lists pass through."""
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(name) for name in value]


def find_invalid_names(names: Iterable[str], all_databases: Sequence[str]) -> List[str]:
    valid = set(all_databases)
    return [name for name in names if name not in valid]


def select_databases(
    all_databases: Sequence[str],
    include_names: Sequence[str] = (),
    exclude_names: Sequence[str] = (),
) -> List[str]:
    """Returns the databases to back up, in base list order.

    The base list is ``include_names`` when given, otherwise every database.
    Every included name must be a known database; all unknown names are
    reported together. Excluded names are removed from the base list, and
    excluded names that are not in it are ignored.
    """
    if include_names:
        invalid = find_invalid_names(include_names, all_databases)
        if invalid:
            raise BackupError(
                actionable_error(
                    "invalid_database_names",
                    names=", ".join(f'"{name}"' for name in invalid),
                    valid=" ".join(all_databases),
                ),
                exit_code=EXIT_INVALID_DATABASE_NAMES,
            )
        selection = list(include_names)
    else:
        selection = list(all_databases)

    if exclude_names:
        excluded = set(exclude_names)
        selection = [name for name in selection if name not in excluded]

    return selection
