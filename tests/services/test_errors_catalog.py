import pytest

from mariadbbackup.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("invalid_database_names", names='"x"', valid="a b c")

    assert 'Not valid ICP MariaDB database name(s): "x".' in message
    assert "Suggested action:" in message
    assert "a b c" in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError, match="Unknown error catalog key"):
        actionable_error("no_such_error")
