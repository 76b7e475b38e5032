"""Conversation structures and answer recovery.

An agent exchange comes back as a list of turns, each holding steps, each
optionally holding a message with optional text. Every level may be missing;
absence is never an error here, it only means nothing was found at that level.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

AGENT_TURN = "agentConversationTurn"
USER_TURN = "userConversationTurn"
ASSISTANT_MESSAGE = "assistantMessage"


@dataclass(frozen=True)
class StepMessage:
    """Message payload of a step."""
    text: Optional[str] = None


@dataclass(frozen=True)
class Step:
    """One sub-event within a turn (assistant message, tool call, ...)."""
    kind: str
    message: Optional[StepMessage] = None

    @property
    def text(self) -> Optional[str]:
        if self.message is None:
            return None
        return self.message.text

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['Step']:
        if not isinstance(data, dict):
            return None
        message = data.get('message')
        text = message.get('text') if isinstance(message, dict) else None
        return cls(
            kind=str(data.get('type', '')),
            message=StepMessage(text=text if isinstance(text, str) else None)
            if isinstance(message, dict) else None,
        )


@dataclass(frozen=True)
class ConversationTurn:
    """One exchange unit produced by an agent session."""
    kind: str
    steps: Optional[Sequence[Step]] = None

    @property
    def steps_count(self) -> int:
        return len(self.steps) if self.steps else 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['ConversationTurn']:
        """Build a turn from the SDK-style ``{type, turn: {steps}}`` mapping."""
        if not isinstance(data, dict):
            return None
        turn = data.get('turn')
        raw_steps = turn.get('steps') if isinstance(turn, dict) else None
        steps = None
        if isinstance(raw_steps, list):
            steps = tuple(s for s in (Step.from_dict(r) for r in raw_steps) if s is not None)
        return cls(kind=str(data.get('type', '')), steps=steps)


def extract_last_assistant_message(
    conversation: Optional[Sequence[ConversationTurn]],
) -> Optional[str]:
    """Return the most recent non-empty assistant text, or None.

    Turns and steps are both scanned newest first; the first assistant
    message whose text is non-empty after stripping wins.
    """
    for turn in reversed(conversation or ()):
        if turn is None or turn.kind != AGENT_TURN:
            continue
        for step in reversed(turn.steps or ()):
            if step is None or step.kind != ASSISTANT_MESSAGE:
                continue
            text = (step.text or "").strip()
            if text:
                return text
    return None


def describe_conversation(
    conversation: Optional[Sequence[ConversationTurn]],
) -> List[Dict[str, Any]]:
    """Summarize turn kinds and step counts for bug reports."""
    return [
        {
            'type': turn.kind,
            'steps_count': turn.steps_count if turn.kind == AGENT_TURN else 0,
        }
        for turn in (conversation or ())
        if turn is not None
    ]


# Fenced block holding an object; the lazy body stops at the first closing
# brace that is directly followed by the closing fence.
FENCED_JSON_PATTERN = re.compile(r'```(?:json)?\s*(\{.*?\})\s*```', re.DOTALL | re.IGNORECASE)


def extract_json(text: str) -> str:
    """Best-effort recovery of a JSON object embedded in model output.

    Tries a fenced code block first, then the span from the first ``{`` to
    the last ``}``. When neither exists the input is returned unchanged so
    that parsing fails loudly downstream. Never raises.
    """
    if not text:
        return text

    match = FENCED_JSON_PATTERN.search(text)
    if match:
        return match.group(1)

    start = text.find('{')
    end = text.rfind('}')
    if start != -1 and end > start:
        return text[start:end + 1]

    return text
