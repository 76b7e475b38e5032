"""Interactive accept / reject-with-feedback / regenerate loop."""

from contextlib import nullcontext
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

import click

from .errors import RegenerationFailure

T = TypeVar('T')

FEEDBACK_PROMPT = "How should it be improved?"

# Raised by click prompts on Ctrl+C / Ctrl+D.
INTERRUPTS = (click.Abort, KeyboardInterrupt, EOFError)


@dataclass
class RefinementResult(Generic[T]):
    accepted: bool
    value: T


class RefinementLoop(Generic[T]):
    """Shows an artifact until the user accepts it or cancels.

    Rejecting asks for feedback; empty feedback cancels, anything else is
    handed to ``regenerate``. A regenerate that returns None (or raises
    RegenerationFailure) keeps the previous value. The loop has no
    iteration bound.

    Args:
        ui: Object with ``confirm``, ``text_input``, ``status`` and the
            ``print_success`` / ``print_warning`` helpers (see BaseCommand)
    """

    def __init__(self, ui):
        self.ui = ui

    def run(self, initial: T,
            display: Callable[[T], None],
            regenerate: Callable[[str], Optional[T]],
            confirm_prompt: str,
            auto_accept: bool = False,
            spinner_text: Optional[str] = None) -> RefinementResult[T]:
        current = initial

        while True:
            display(current)

            if auto_accept:
                return RefinementResult(accepted=True, value=current)

            try:
                if self.ui.confirm(confirm_prompt, default=True):
                    return RefinementResult(accepted=True, value=current)

                feedback = self.ui.text_input(FEEDBACK_PROMPT)
            except INTERRUPTS:
                return RefinementResult(accepted=False, value=current)

            if not feedback or not feedback.strip():
                return RefinementResult(accepted=False, value=current)

            status = self.ui.status(spinner_text) if spinner_text else nullcontext()
            try:
                with status:
                    new_value = regenerate(feedback.strip())
            except RegenerationFailure:
                new_value = None
            except KeyboardInterrupt:
                return RefinementResult(accepted=False, value=current)

            if new_value is None:
                self.ui.print_warning("Failed to regenerate")
            else:
                current = new_value
                self.ui.print_success("Regenerated")
