"""Shared fixtures: a scripted agent backend and a recording UI."""

from contextlib import contextmanager
from typing import Dict, List, Optional

import pytest

from rivet.backends.base import AgentBackend
from rivet.session import AgentSession


class ScriptedBackend(AgentBackend):
    """Replies with pre-recorded texts, one per call, split into fragments."""

    name = "scripted"
    default_model = "scripted-model"
    requires_api_key = False

    def __init__(self, replies: Optional[List[str]] = None, **kwargs):
        super().__init__(**kwargs)
        self.replies = list(replies or [])
        self.calls: List[Dict] = []

    def stream_reply(self, messages, system=None):
        self.calls.append({'messages': [dict(m) for m in messages], 'system': system})
        reply = self.replies.pop(0) if self.replies else ""
        for i in range(0, len(reply), 5):
            yield reply[i:i + 5]


class FakeUI:
    """Stands in for a command: scripted answers, recorded output."""

    def __init__(self, confirms=(), feedback=()):
        self.confirms = list(confirms)
        self.feedback = list(feedback)
        self.prompts: List[str] = []
        self.warnings: List[str] = []
        self.successes: List[str] = []
        self.spinners: List[str] = []

    def confirm(self, message, default=True):
        self.prompts.append(message)
        answer = self.confirms.pop(0)
        if isinstance(answer, BaseException) or isinstance(answer, type):
            raise answer
        return answer

    def text_input(self, message, default=""):
        self.prompts.append(message)
        answer = self.feedback.pop(0)
        if isinstance(answer, BaseException) or isinstance(answer, type):
            raise answer
        return answer

    @contextmanager
    def status(self, message):
        self.spinners.append(message)
        yield

    def print_warning(self, message):
        self.warnings.append(message)

    def print_success(self, message):
        self.successes.append(message)


@pytest.fixture
def scripted_session():
    """Factory for sessions backed by a ScriptedBackend."""
    def make(*replies):
        return AgentSession(ScriptedBackend(list(replies)), working_directory="/tmp/repo")
    return make


@pytest.fixture
def fake_ui():
    return FakeUI
