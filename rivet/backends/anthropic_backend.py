"""Anthropic Claude transport."""

from typing import Dict, Iterator, List, Optional

import anthropic

from ..errors import AgentTransportError
from .base import AgentBackend


class AnthropicBackend(AgentBackend):
    """Streams replies through the Anthropic Messages API."""

    name = "anthropic"
    default_model = "claude-sonnet-4-5-20250929"
    diagnostic_loggers = ("anthropic", "httpx", "httpcore")

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 max_tokens: int = 2048, **kwargs):
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens)
        self.client = anthropic.Anthropic(api_key=api_key)

    def stream_reply(self, messages: List[Dict[str, str]],
                     system: Optional[str] = None) -> Iterator[str]:
        params = {
            'model': self.model,
            'max_tokens': self.max_tokens,
            'messages': messages,
        }
        if system:
            params['system'] = system

        try:
            with self.client.messages.stream(**params) as stream:
                for text in stream.text_stream:
                    if text:
                        yield text
        except anthropic.APIError as e:
            raise AgentTransportError(self.name, str(e)) from e
