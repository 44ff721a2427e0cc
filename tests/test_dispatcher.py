"""
Tests for the command dispatcher.

Routing is tested against a mocked repository. The scenario at the end
runs the real repository on a temporary SQLite file.
"""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from expense_tracker.dispatcher import (
    ADD_USAGE,
    CLEAR_PROMPT,
    EXIT_FAILURE,
    EXIT_OK,
    HELP_TEXT,
    CommandDispatcher,
    main,
)
from expense_tracker.models.expense import Operation, OperationResult
from expense_tracker.repository import ALL_DELETED, ExpenseRepository
from expense_tracker.reports import NO_EXPENSES


def answers(*replies):
    """Prompt stub that returns replies in order and records the questions."""
    asked = []
    remaining = list(replies)

    def prompt(question):
        asked.append(question)
        return remaining.pop(0)

    prompt.asked = asked
    return prompt


def closed_input(question):
    raise EOFError


@pytest.fixture
def repo():
    mock = MagicMock(spec=ExpenseRepository)
    ok = OperationResult(operation=Operation.LIST)
    for name in ("list", "add", "search", "delete_by_id", "delete_all"):
        getattr(mock, name).return_value = ok
    return mock


def make_dispatcher(repo, output, prompt=closed_input, audit_logger=None):
    return CommandDispatcher(repo, prompt=prompt, output=output.append, audit_logger=audit_logger)


class TestRouting:
    """Tests for command selection."""

    def test_list(self, repo, output):
        assert make_dispatcher(repo, output).dispatch(["list"]) == EXIT_OK
        repo.list.assert_called_once_with()

    def test_add(self, repo, output):
        assert make_dispatcher(repo, output).dispatch(["add", "12.50", "groceries"]) == EXIT_OK
        repo.add.assert_called_once_with("12.50", "groceries")

    def test_search_passes_pattern(self, repo, output):
        make_dispatcher(repo, output).dispatch(["search", "Groc"])
        repo.search.assert_called_once_with("Groc")

    def test_search_without_pattern(self, repo, output):
        """Test a missing pattern is passed through as-is."""
        make_dispatcher(repo, output).dispatch(["search"])
        repo.search.assert_called_once_with(None)

    def test_delete_passes_id_unchanged(self, repo, output):
        """Test the id is not validated here."""
        make_dispatcher(repo, output).dispatch(["delete", "abc"])
        repo.delete_by_id.assert_called_once_with("abc")

    def test_delete_without_id(self, repo, output):
        make_dispatcher(repo, output).dispatch(["delete"])
        repo.delete_by_id.assert_called_once_with(None)

    @pytest.mark.parametrize("tokens", [[], ["help"], ["LIST"], ["remove", "1"]])
    def test_unknown_command_prints_help(self, repo, output, tokens):
        """Test anything unrecognized shows help and touches nothing."""
        assert make_dispatcher(repo, output).dispatch(tokens) == EXIT_OK
        assert output == [HELP_TEXT]
        assert repo.mock_calls == []


class TestAddUsage:
    """Tests for the add argument check."""

    @pytest.mark.parametrize("tokens", [
        ["add"],
        ["add", "12.50"],
        ["add", "", "groceries"],
        ["add", "12.50", ""],
    ])
    def test_missing_arguments(self, repo, output, audit_logger, tokens):
        """Test add without both arguments is a usage error, not a failure."""
        code = make_dispatcher(repo, output, audit_logger=audit_logger).dispatch(tokens)

        assert code == EXIT_OK
        assert output == [ADD_USAGE]
        repo.add.assert_not_called()
        assert audit_logger.event_types == ["usage_error"]


class TestClear:
    """Tests for the confirmation gate on clear."""

    @pytest.mark.parametrize("reply", ["y", "Y"])
    def test_confirmed(self, repo, output, reply):
        prompt = answers(reply)
        assert make_dispatcher(repo, output, prompt).dispatch(["clear"]) == EXIT_OK
        assert prompt.asked == [CLEAR_PROMPT]
        repo.delete_all.assert_called_once_with()

    @pytest.mark.parametrize("reply", ["n", "", "yes", " y", "no"])
    def test_declined(self, repo, output, audit_logger, reply):
        """Test anything but y leaves the data alone."""
        dispatcher = make_dispatcher(repo, output, answers(reply), audit_logger)
        assert dispatcher.dispatch(["clear"]) == EXIT_OK
        repo.delete_all.assert_not_called()
        assert output == []
        assert audit_logger.event_types == ["clear_declined"]

    def test_closed_input_declines(self, repo, output):
        assert make_dispatcher(repo, output, closed_input).dispatch(["clear"]) == EXIT_OK
        repo.delete_all.assert_not_called()


class TestExitCodes:
    """Tests for turning results into exit codes."""

    def test_failed_operation(self, repo, output):
        """Test a failed result prints the error and exits non-zero."""
        repo.list.return_value = OperationResult(
            operation=Operation.LIST,
            success=False,
            error_type="StorageConnectionError",
            error_message="could not connect to server",
        )
        assert make_dispatcher(repo, output).dispatch(["list"]) == EXIT_FAILURE
        assert output == ["Error: could not connect to server"]

    def test_not_found_is_success(self, repo, output):
        repo.delete_by_id.return_value = OperationResult(
            operation=Operation.DELETE,
            not_found=True,
            message="There is no expense with the id '9'.",
        )
        assert make_dispatcher(repo, output).dispatch(["delete", "9"]) == EXIT_OK


class TestMain:
    """Tests for the console entry point."""

    @pytest.fixture(autouse=True)
    def environment(self, monkeypatch, db_url, clean_settings_cache):
        monkeypatch.setenv("EXPENSES_DB_URL", db_url)
        monkeypatch.setenv("EXPENSES_LOG_LEVEL", "ERROR")

    def test_add_and_list(self, capsys):
        assert main(["add", "12.50", "groceries"]) == EXIT_OK
        assert main(["list"]) == EXIT_OK

        stdout = capsys.readouterr().out
        assert "Expense added." in stdout
        assert "There is 1 expense." in stdout
        assert "Total " + "12.50".rjust(10) in stdout

    def test_constraint_violation_exits_non_zero(self, capsys):
        assert main(["add", "-4.00", "refund"]) == EXIT_FAILURE
        assert capsys.readouterr().out.startswith("Error: ")

    def test_help(self, capsys):
        assert main([]) == EXIT_OK
        assert HELP_TEXT in capsys.readouterr().out

    def test_invalid_configuration(self, monkeypatch, capsys):
        monkeypatch.setenv("EXPENSES_LOG_LEVEL", "LOUD")
        assert main(["list"]) == EXIT_FAILURE
        assert capsys.readouterr().out.startswith("Error: invalid configuration")

    def test_launcher_documents_install_step(self):
        """Test app/main.py tells users to install the package first."""
        launcher = Path(__file__).resolve().parents[1] / "app" / "main.py"
        assert "pip install -e ." in launcher.read_text(encoding="utf-8")


class TestScenario:
    """The groceries/coffee walk-through, end to end."""

    def test_full_session(self, repository, output):
        prompt = answers("n", "y")
        dispatcher = CommandDispatcher(repository, prompt=prompt, output=output.append)

        assert dispatcher.dispatch(["add", "12.50", "groceries"]) == EXIT_OK
        assert dispatcher.dispatch(["add", "5.00", "coffee"]) == EXIT_OK
        output.clear()

        dispatcher.dispatch(["list"])
        assert output[0] == "There are 2 expenses."
        assert output[-1] == "Total " + "17.50".rjust(10)
        groceries_id = output[1].split("|")[0].strip()

        output.clear()
        dispatcher.dispatch(["delete", groceries_id])
        output.clear()
        dispatcher.dispatch(["list"])
        assert output[0] == "There is 1 expense."
        assert output[1].endswith(" | coffee")
        assert output[-1] == "Total " + "5.00".rjust(10)

        output.clear()
        dispatcher.dispatch(["clear"])
        dispatcher.dispatch(["list"])
        assert output[0] == "There is 1 expense."

        output.clear()
        dispatcher.dispatch(["clear"])
        assert output == [ALL_DELETED]

        output.clear()
        dispatcher.dispatch(["list"])
        assert output == [NO_EXPENSES]

        result = repository.add("3.00", "tea")
        assert result.expenses[0].id == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
