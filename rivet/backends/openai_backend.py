"""OpenAI GPT transport."""

from typing import Dict, Iterator, List, Optional

import openai

from ..errors import AgentTransportError
from .base import AgentBackend


class OpenAIBackend(AgentBackend):
    """Streams replies through the OpenAI chat completions API."""

    name = "openai"
    default_model = "gpt-4o-mini"
    diagnostic_loggers = ("openai", "httpx", "httpcore")

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 max_tokens: int = 2048, **kwargs):
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens)
        self.client = openai.OpenAI(api_key=api_key)

    def stream_reply(self, messages: List[Dict[str, str]],
                     system: Optional[str] = None) -> Iterator[str]:
        chat_messages = []
        if system:
            chat_messages.append({'role': 'system', 'content': system})
        chat_messages.extend(messages)

        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=chat_messages,
                max_tokens=self.max_tokens,
                stream=True,
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        except openai.APIError as e:
            raise AgentTransportError(self.name, str(e)) from e
