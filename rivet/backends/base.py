"""Base class for agent transports."""

from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Tuple


class AgentBackend(ABC):
    """Streams one assistant reply for a role/content message history.

    Backends are stateless with respect to the conversation; the session
    that owns them keeps the history and hands it over on every call.
    """

    name: str = ""
    default_model: str = ""
    requires_api_key: bool = True
    # Loggers the backend's SDK writes diagnostics to.
    diagnostic_loggers: Tuple[str, ...] = ()

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 max_tokens: int = 2048, **kwargs):
        self.api_key = api_key
        self.model = model or self.default_model
        self.max_tokens = max_tokens

    @abstractmethod
    def stream_reply(self, messages: List[Dict[str, str]],
                     system: Optional[str] = None) -> Iterator[str]:
        """Yield text fragments of the assistant's reply in arrival order.

        Args:
            messages: Conversation so far, oldest first, roles user/assistant
            system: Optional system preamble

        Yields:
            Text deltas
        """
        pass
