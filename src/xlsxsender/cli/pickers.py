"""Interactive folder picker for the terminal."""

from __future__ import annotations

import logging

import typer

from xlsxsender.core.folders import FolderHandle, open_local_folder
from xlsxsender.shared.errors import FolderSelectionCancelled

logger = logging.getLogger(__name__)


class PromptFolderPicker:
    """Asks for a folder path on the terminal.

    An empty answer, Ctrl-C or end of input cancels the selection.
    """

    def __init__(self, *, atomic_writes: bool = False) -> None:
        self.atomic_writes = atomic_writes

    def choose_folder(self, purpose: str) -> FolderHandle:
        try:
            answer = typer.prompt(
                f"Path of the {purpose} folder (empty to cancel)",
                default="",
                show_default=False,
            )
        except (typer.Abort, EOFError, KeyboardInterrupt) as e:
            raise FolderSelectionCancelled(purpose) from e

        answer = answer.strip()
        if not answer:
            raise FolderSelectionCancelled(purpose)

        logger.debug("User chose %s folder: %s", purpose, answer)
        return open_local_folder(answer, atomic_writes=self.atomic_writes)
