"""Custom completer for the Shock CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, PATH_COMMANDS


class ShockCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local path completion for the 'upload' command's file argument
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in PATH_COMMANDS:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        if current_word.startswith("--"):
            return

        yield from self._complete_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete file and directory paths relative to the working directory.

        Directories are suggested with a trailing slash; hidden entries only
        when the partial name starts with a dot.
        """
        partial_path = Path(partial) if partial else Path(".")
        if partial.endswith("/") or not partial:
            directory, prefix = partial_path, ""
        else:
            directory, prefix = partial_path.parent, partial_path.name

        if not directory.is_dir():
            return

        base = "" if str(directory) == "." and not partial.startswith("./") else f"{directory}/"
        if partial.endswith("/"):
            base = partial

        for item in sorted(directory.iterdir()):
            if not item.name.startswith(prefix):
                continue
            if item.name.startswith(".") and not prefix.startswith("."):
                continue
            suffix = "/" if item.is_dir() else ""
            yield Completion(f"{base}{item.name}{suffix}", start_position=-len(partial))
