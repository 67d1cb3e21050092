"""Tests for ShockCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import ShockCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    """Create a ShockCompleter instance."""
    return ShockCompleter()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """
    Create a working directory with test files and chdir into it.

    Returns:
        Path to the working directory
    """
    (tmp_path / "reads.fastq").write_text("content")
    (tmp_path / "report.txt").write_text("content")
    (tmp_path / ".hidden").write_text("content")
    data = tmp_path / "data"
    data.mkdir()
    (data / "genome.fa").write_text("content")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        """Empty input should suggest all commands."""
        completions = get_completions_list(completer, "")
        for cmd in COMMANDS:
            assert cmd in completions

    def test_partial_command_filters(self, completer):
        completions = get_completions_list(completer, "no")
        assert completions == ["node", "nodes"]

    def test_command_completion_case_insensitive(self, completer):
        """Command completion should be case insensitive."""
        assert get_completions_list(completer, "UP") == ["upload"]


class TestPathCompletion:
    """Tests for local path completion in the upload command."""

    def test_upload_lists_working_directory(self, completer, workdir):
        """After 'upload ', should show visible entries of the cwd."""
        completions = get_completions_list(completer, "upload ")
        assert completions == ["data/", "reads.fastq", "report.txt"]

    def test_upload_filters_by_prefix(self, completer, workdir):
        assert get_completions_list(completer, "upload re") == ["reads.fastq", "report.txt"]

    def test_upload_descends_into_directory(self, completer, workdir):
        assert get_completions_list(completer, "upload data/") == ["data/genome.fa"]
        assert get_completions_list(completer, "upload data/ge") == ["data/genome.fa"]

    def test_hidden_files_need_dot_prefix(self, completer, workdir):
        assert ".hidden" not in get_completions_list(completer, "upload ")
        assert get_completions_list(completer, "upload .h") == [".hidden"]

    def test_dot_slash_prefix_is_kept(self, completer, workdir):
        assert get_completions_list(completer, "upload ./rea") == ["./reads.fastq"]

    def test_options_are_not_completed(self, completer, workdir):
        assert get_completions_list(completer, "upload --re") == []

    def test_path_after_options(self, completer, workdir):
        assert get_completions_list(completer, "upload --resume rep") == ["report.txt"]

    def test_missing_directory(self, completer, workdir):
        assert get_completions_list(completer, "upload nowhere/x") == []


class TestOtherCommands:
    """Commands without path arguments get no completions."""

    def test_node_has_no_argument_completion(self, completer, workdir):
        assert get_completions_list(completer, "node ") == []

    def test_delete_has_no_argument_completion(self, completer, workdir):
        assert get_completions_list(completer, "delete r") == []
