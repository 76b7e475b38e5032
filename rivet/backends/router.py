"""Backend selection and credential resolution."""

import os
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError
from .base import AgentBackend

BACKEND_NAMES = ('anthropic', 'openai', 'ollama')

# Used when a key is supplied without naming its provider.
DEFAULT_BACKEND = 'anthropic'

# Provider-specific environment variables, checked after RIVET_API_KEY.
API_KEY_ENV_VARS = {
    'anthropic': 'ANTHROPIC_API_KEY',
    'openai': 'OPENAI_API_KEY',
}

CONFIGURATION_HINT = (
    "Set a key with: export OPENAI_API_KEY=your_key "
    "(or ANTHROPIC_API_KEY), use --backend ollama for a local model, "
    "or run: rivet init"
)


def detect_backend(env: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Pick a backend from the environment (cost-optimized priority)."""
    env = os.environ if env is None else env
    if env.get('OPENAI_API_KEY'):
        return 'openai'
    if env.get('ANTHROPIC_API_KEY'):
        return 'anthropic'
    return None


def resolve_credentials(
    backend: Optional[str] = None,
    api_key: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> Tuple[str, Optional[str]]:
    """Resolve the backend name and API key to use.

    Args:
        backend: Explicit backend name (flag, env or config)
        api_key: Explicit key (flag or config file)
        env: Environment mapping (defaults to os.environ)

    Returns:
        Tuple of (backend name, api key or None for keyless backends)

    Raises:
        ConfigurationError: If the backend is unknown or no key is available
    """
    env = os.environ if env is None else env

    if backend is not None and backend not in BACKEND_NAMES:
        raise ConfigurationError(
            f"Unknown backend: {backend}",
            hint=f"Choose one of: {', '.join(BACKEND_NAMES)}",
        )

    name = backend or detect_backend(env)
    if name is None:
        if api_key or env.get('RIVET_API_KEY'):
            name = DEFAULT_BACKEND
        else:
            raise ConfigurationError("No API key found", hint=CONFIGURATION_HINT)

    if name == 'ollama':
        return name, None

    key = api_key or env.get('RIVET_API_KEY') or env.get(API_KEY_ENV_VARS[name])
    if not key:
        raise ConfigurationError(
            f"{API_KEY_ENV_VARS[name]} not found", hint=CONFIGURATION_HINT
        )
    return name, key


def create_backend(name: str, api_key: Optional[str] = None,
                   model: Optional[str] = None, **kwargs) -> AgentBackend:
    """Instantiate a backend by name."""
    if name == 'anthropic':
        from .anthropic_backend import AnthropicBackend
        return AnthropicBackend(api_key=api_key, model=model, **kwargs)
    if name == 'openai':
        from .openai_backend import OpenAIBackend
        return OpenAIBackend(api_key=api_key, model=model, **kwargs)
    if name == 'ollama':
        from .ollama_backend import OllamaBackend
        return OllamaBackend(model=model, **kwargs)
    raise ConfigurationError(
        f"Unknown backend: {name}",
        hint=f"Choose one of: {', '.join(BACKEND_NAMES)}",
    )
