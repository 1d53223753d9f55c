"""Interpretation of captured command text.

Targets report nothing but text. A command that printed nothing succeeded;
a command that printed anything failed, and what it printed is the
diagnostic message.
"""

from __future__ import annotations

from shellfs.exceptions import RemoteCommandFailedError
from shellfs.types import Classification, CommandOutcome


def classify(outcome: CommandOutcome) -> Classification:
    """Classify a command outcome by the presence of captured text.

    Args:
        outcome: Captured result of one command.

    Returns:
        Success when the text is empty, otherwise a failure carrying the
        text verbatim.
    """
    if outcome.succeeded:
        return Classification.ok()
    return Classification.failed(outcome.text)


def raise_for_outcome(outcome: CommandOutcome) -> None:
    """Raise if the command outcome is a failure.

    Args:
        outcome: Captured result of one command.

    Raises:
        RemoteCommandFailedError: If the outcome carries diagnostic text.
    """
    result = classify(outcome)
    if not result.success:
        raise RemoteCommandFailedError(result.message)
