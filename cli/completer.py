"""Custom completer for the ChunkDrive CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class ChunkDriveCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the first argument of 'upload'
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

        if tokens[0].lower() != "upload":
            return

        argument_index = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
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

        Directories are suggested with a trailing '/'.
        """
        if "/" in partial:
            directory_part, _, name_part = partial.rpartition("/")
            directory = Path(directory_part or "/")
            prefix = f"{directory_part}/"
        else:
            directory = Path.cwd()
            name_part = partial
            prefix = ""

        if not directory.is_dir():
            return

        for item in sorted(directory.iterdir()):
            if not item.name.startswith(name_part) or item.name.startswith("."):
                continue
            suffix = "/" if item.is_dir() else ""
            yield Completion(f"{prefix}{item.name}{suffix}", start_position=-len(partial))
