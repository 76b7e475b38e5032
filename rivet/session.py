"""Agent session adapter.

A session is one continuous agent conversation. Submitting a message returns
a pending handle; drawing its result streams the reply, fires the delta and
step callbacks, and yields the turns of that exchange. Sessions remember
their history, so later submits continue the same conversation.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from .backends import AgentBackend, create_backend, resolve_credentials
from .conversation import (
    AGENT_TURN,
    ASSISTANT_MESSAGE,
    USER_TURN,
    ConversationTurn,
    Step,
    StepMessage,
)

DeltaCallback = Callable[[str], None]
StepCallback = Callable[[Step], None]

SYSTEM_PREAMBLE = (
    "You help developers write git commit messages and pull request "
    "descriptions. The repository under discussion is at: {working_directory}. "
    "Follow the requested output format exactly."
)


@contextmanager
def suppressed_diagnostics(logger_names: Sequence[str] = ()) -> Iterator[None]:
    """Silence stderr and the named loggers for the duration of the block.

    The original stderr and logger states are restored on every exit path.
    """
    loggers = [logging.getLogger(name) for name in logger_names]
    saved_states = [(logger, logger.disabled) for logger in loggers]
    original_stderr = sys.stderr
    sink = open(os.devnull, 'w')

    for logger in loggers:
        logger.disabled = True
    sys.stderr = sink
    try:
        yield
    finally:
        sys.stderr = original_stderr
        for logger, was_disabled in saved_states:
            logger.disabled = was_disabled
        sink.close()


class PendingConversation:
    """Handle for a submitted message; ``result()`` waits for the exchange."""

    def __init__(self, session: 'AgentSession', message: str,
                 on_delta: Optional[DeltaCallback] = None,
                 on_step: Optional[StepCallback] = None):
        self._session = session
        self._message = message
        self._on_delta = on_delta
        self._on_step = on_step
        self._turns: Optional[List[ConversationTurn]] = None

    @property
    def done(self) -> bool:
        return self._turns is not None

    def result(self) -> List[ConversationTurn]:
        if self._turns is None:
            self._turns = self._session._exchange(
                self._message, self._on_delta, self._on_step
            )
        return self._turns


class AgentSession:
    """One continuous conversation with an agent backend."""

    def __init__(self, backend: AgentBackend, working_directory: Optional[str] = None):
        self.backend = backend
        self.working_directory = working_directory or os.getcwd()
        self.history: List[Dict[str, str]] = []
        self.turns: List[ConversationTurn] = []

    @property
    def model(self) -> str:
        return self.backend.model

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PREAMBLE.format(working_directory=self.working_directory)

    def submit(self, message: str, on_delta: Optional[DeltaCallback] = None,
               on_step: Optional[StepCallback] = None) -> PendingConversation:
        """Queue a message on this conversation.

        Args:
            message: Prompt text
            on_delta: Called with each streamed text fragment, before completion
            on_step: Called once per completed step, in order

        Returns:
            PendingConversation whose ``result()`` yields this exchange's turns
        """
        return PendingConversation(self, message, on_delta, on_step)

    @contextmanager
    def suppressed_diagnostics(self) -> Iterator[None]:
        with suppressed_diagnostics(self.backend.diagnostic_loggers):
            yield

    def _exchange(self, message: str, on_delta: Optional[DeltaCallback],
                  on_step: Optional[StepCallback]) -> List[ConversationTurn]:
        messages = self.history + [{'role': 'user', 'content': message}]

        fragments = []
        for fragment in self.backend.stream_reply(messages, system=self.system_prompt):
            fragments.append(fragment)
            if on_delta is not None:
                on_delta(fragment)

        reply = "".join(fragments)
        step = Step(kind=ASSISTANT_MESSAGE, message=StepMessage(text=reply))
        if on_step is not None:
            on_step(step)

        turns = [
            ConversationTurn(kind=USER_TURN, steps=()),
            ConversationTurn(kind=AGENT_TURN, steps=(step,)),
        ]
        # Empty replies are not kept so the history stays valid for providers
        # that reject blank assistant messages.
        if reply.strip():
            self.history = messages + [{'role': 'assistant', 'content': reply}]
        self.turns.extend(turns)
        return turns


def open_session(api_key: Optional[str] = None, model: Optional[str] = None,
                 working_directory: Optional[str] = None,
                 backend: Optional[str] = None, **backend_options) -> AgentSession:
    """Open a fresh agent session.

    Raises:
        ConfigurationError: If no credential is available from explicit input
            or the environment
    """
    name, key = resolve_credentials(backend=backend, api_key=api_key)
    agent = create_backend(name, api_key=key, model=model, **backend_options)
    return AgentSession(agent, working_directory=working_directory)
