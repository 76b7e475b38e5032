"""Local Ollama transport (no API key needed)."""

import json
from typing import Dict, Iterator, List, Optional

import requests

from ..errors import AgentTransportError
from .base import AgentBackend

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaBackend(AgentBackend):
    """Streams replies from an Ollama server's ``/api/chat`` endpoint."""

    name = "ollama"
    default_model = "llama3"
    requires_api_key = False
    diagnostic_loggers = ("urllib3",)

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 max_tokens: int = 2048, ollama_url: str = DEFAULT_OLLAMA_URL,
                 timeout: int = 300, **kwargs):
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens)
        self.base_url = (ollama_url or DEFAULT_OLLAMA_URL).rstrip('/')
        self.timeout = timeout

    def stream_reply(self, messages: List[Dict[str, str]],
                     system: Optional[str] = None) -> Iterator[str]:
        chat_messages = []
        if system:
            chat_messages.append({'role': 'system', 'content': system})
        chat_messages.extend(messages)

        payload = {
            'model': self.model,
            'messages': chat_messages,
            'stream': True,
            'options': {'num_predict': self.max_tokens},
        }
        try:
            with requests.post(f"{self.base_url}/api/chat", json=payload,
                               stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                for line in response.iter_lines():
                    if not line:
                        continue
                    data = json.loads(line)
                    content = (data.get('message') or {}).get('content')
                    if content:
                        yield content
                    if data.get('done'):
                        break
        except requests.RequestException as e:
            raise AgentTransportError(self.name, str(e)) from e
        except json.JSONDecodeError as e:
            raise AgentTransportError(self.name, f"malformed stream line: {e}") from e
