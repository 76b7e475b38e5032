"""Project configuration stored in ``rivet.config.json``."""

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .backends.router import BACKEND_NAMES
from .prompts import COMMIT_STYLES

CONFIG_FILE = "rivet.config.json"


@dataclass(frozen=True)
class RivetConfig:
    """Settings for one working directory.

    Every field is optional; missing values fall back to environment
    variables or backend defaults at the point of use.
    """

    api_key: Optional[str] = None
    backend: Optional[str] = None
    model: Optional[str] = None
    ollama_url: Optional[str] = None
    default_base_branch: Optional[str] = None
    commit_style: Optional[str] = None
    commit_system_prompt: Optional[str] = None
    pr_system_prompt: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RivetConfig':
        """Build a config, ignoring unknown keys and invalid choices."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                continue
            if isinstance(value, str) and value.strip():
                values[key] = value.strip()

        if values.get('commit_style') not in COMMIT_STYLES:
            values.pop('commit_style', None)
        if values.get('backend') not in BACKEND_NAMES:
            values.pop('backend', None)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'RivetConfig':
        """Load config from disk; a missing or unreadable file yields defaults."""
        config_path = Path(path) if path else default_config_path()
        if not config_path.is_file():
            return cls()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        config_path = Path(path) if path else default_config_path()
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")
        return config_path

    def with_env_overrides(self, env: Optional[Dict[str, str]] = None) -> 'RivetConfig':
        """Apply RIVET_MODEL and RIVET_BACKEND over file values."""
        env = os.environ if env is None else env
        overrides = {}
        if env.get('RIVET_MODEL'):
            overrides['model'] = env['RIVET_MODEL']
        if env.get('RIVET_BACKEND') in BACKEND_NAMES:
            overrides['backend'] = env['RIVET_BACKEND']
        return replace(self, **overrides) if overrides else self


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_FILE
