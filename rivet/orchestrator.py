"""Two-turn orchestration: analyze the changes, then generate the artifact.

The analysis turn condenses raw change data into a short synopsis. The
generation turn runs on a fresh session so it does not inherit the analysis
conversation; that generation session then stays with the returned
``Generation`` handle, and every regenerate continues it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, TypeVar

from .artifacts import parse_commit_message, parse_pr_payload
from .config import RivetConfig
from .conversation import (
    ASSISTANT_MESSAGE,
    ConversationTurn,
    Step,
    describe_conversation,
    extract_last_assistant_message,
)
from .errors import (
    AgentTransportError,
    EmptyAnalysisError,
    EmptyGenerationError,
    MalformedPayloadError,
    RegenerationFailure,
)
from .models import AnalysisContext, AnalysisMode, PrData
from .prompts import (
    build_analysis_prompt,
    build_commit_prompt,
    build_commit_regeneration_prompt,
    build_pr_prompt,
    build_pr_regeneration_prompt,
)
from .session import AgentSession, DeltaCallback

T = TypeVar('T')

SessionFactory = Callable[[], AgentSession]


class OrchestratorState(Enum):
    READY = "ready"
    ANALYZING = "analyzing"
    GENERATING = "generating"


@dataclass
class TurnResult:
    """Text recovered from one exchange plus the raw turns behind it."""
    text: str
    turns: List[ConversationTurn]
    source: str  # 'step', 'conversation', 'stream' or 'none'


def run_turn(session: AgentSession, prompt: str,
             on_delta: Optional[DeltaCallback] = None) -> TurnResult:
    """Submit one prompt and recover the assistant's answer.

    The step callback is the primary capture. If it never delivered text,
    the completed conversation is scanned; the streamed fragments are the
    last resort.
    """
    captured = {'step': "", 'stream': []}

    def on_step(step: Step) -> None:
        if step.kind == ASSISTANT_MESSAGE:
            text = (step.text or "").strip()
            if text:
                captured['step'] = text

    def stream(fragment: str) -> None:
        captured['stream'].append(fragment)
        if on_delta is not None:
            on_delta(fragment)

    pending = session.submit(prompt, on_delta=stream, on_step=on_step)
    with session.suppressed_diagnostics():
        turns = pending.result()

    if captured['step']:
        return TurnResult(captured['step'], turns, 'step')

    extracted = extract_last_assistant_message(turns)
    if extracted:
        return TurnResult(extracted, turns, 'conversation')

    streamed = "".join(captured['stream']).strip()
    if streamed:
        return TurnResult(streamed, turns, 'stream')

    return TurnResult("", turns, 'none')


class Generation(ABC, Generic[T]):
    """A generated artifact bound to the session that produced it."""

    what = "content"

    def __init__(self, session: AgentSession, value: T,
                 on_delta: Optional[DeltaCallback] = None):
        self.session = session
        self.value = value
        self.on_delta = on_delta

    @abstractmethod
    def regeneration_prompt(self, previous: T, feedback: str) -> str:
        """Build the follow-up prompt asking for an improved artifact."""
        pass

    @abstractmethod
    def parse(self, text: str) -> T:
        """Turn reply text into an artifact."""
        pass

    def regenerate(self, feedback: str) -> Optional[T]:
        """Ask for an improved artifact on the same conversation.

        Returns:
            The new artifact, or None when the reply was empty or invalid or
            the backend failed (the previous artifact stays current)
        """
        try:
            return self._regenerate(feedback)
        except RegenerationFailure:
            return None

    def _regenerate(self, feedback: str) -> T:
        prompt = self.regeneration_prompt(self.value, feedback)
        try:
            result = run_turn(self.session, prompt, on_delta=self.on_delta)
        except AgentTransportError as e:
            raise RegenerationFailure(str(e)) from e
        if not result.text:
            raise RegenerationFailure(f"Agent returned no {self.what}")
        try:
            new_value = self.parse(result.text)
        except (EmptyGenerationError, MalformedPayloadError) as e:
            raise RegenerationFailure(str(e)) from e
        self.value = new_value
        return new_value


class CommitGeneration(Generation[str]):
    what = "commit message"

    def regeneration_prompt(self, previous: str, feedback: str) -> str:
        return build_commit_regeneration_prompt(previous, feedback)

    def parse(self, text: str) -> str:
        return parse_commit_message(text)


class PrGeneration(Generation[PrData]):
    what = "PR content"

    def __init__(self, session: AgentSession, value: PrData,
                 on_delta: Optional[DeltaCallback] = None,
                 pr_template: Optional[str] = None):
        super().__init__(session, value, on_delta=on_delta)
        self.pr_template = pr_template

    def regeneration_prompt(self, previous: PrData, feedback: str) -> str:
        return build_pr_regeneration_prompt(previous, feedback, self.pr_template)

    def parse(self, text: str) -> PrData:
        return parse_pr_payload(text)


class TurnOrchestrator:
    """Runs the analysis turn and then the generation turn for one command.

    Args:
        session_factory: Opens a new agent session on each call
        config: Style settings (commit style, custom instructions)
    """

    def __init__(self, session_factory: SessionFactory,
                 config: Optional[RivetConfig] = None):
        self.session_factory = session_factory
        self.config = config or RivetConfig()
        self.state = OrchestratorState.READY

    def analyze(self, context: AnalysisContext, mode: AnalysisMode) -> str:
        """Run the analysis turn and return its synopsis.

        Raises:
            EmptyAnalysisError: If neither the step capture nor the
                conversation holds any assistant text
        """
        if self.state == OrchestratorState.GENERATING:
            raise RuntimeError("Analysis cannot run after generation has started")
        self.state = OrchestratorState.ANALYZING

        session = self.session_factory()
        result = run_turn(session, build_analysis_prompt(context, mode))
        if result.source not in ('step', 'conversation'):
            raise EmptyAnalysisError(describe_conversation(result.turns))
        return result.text

    def generate_commit(self, summary: str,
                        on_delta: Optional[DeltaCallback] = None) -> CommitGeneration:
        """Run the generation turn for a commit message.

        Raises:
            EmptyGenerationError: If the agent produced no text
        """
        self.state = OrchestratorState.GENERATING
        session = self.session_factory()
        prompt = build_commit_prompt(
            summary,
            style=self.config.commit_style,
            system_prompt=self.config.commit_system_prompt,
        )
        result = run_turn(session, prompt, on_delta=on_delta)
        if not result.text:
            raise EmptyGenerationError(
                "commit message", describe_conversation(result.turns)
            )
        return CommitGeneration(session, parse_commit_message(result.text), on_delta=on_delta)

    def generate_pr(self, summary: str, pr_template: Optional[str] = None,
                    on_delta: Optional[DeltaCallback] = None) -> PrGeneration:
        """Run the generation turn for a pull request payload.

        Raises:
            EmptyGenerationError: If the agent produced no text
            MalformedPayloadError: If the reply holds no valid JSON object
            MissingFieldError: If title or body is missing
        """
        self.state = OrchestratorState.GENERATING
        session = self.session_factory()
        prompt = build_pr_prompt(
            summary,
            pr_template=pr_template,
            system_prompt=self.config.pr_system_prompt,
        )
        result = run_turn(session, prompt, on_delta=on_delta)
        if not result.text:
            raise EmptyGenerationError("PR content", describe_conversation(result.turns))
        return PrGeneration(
            session,
            parse_pr_payload(result.text),
            on_delta=on_delta,
            pr_template=pr_template,
        )
