"""Error taxonomy for Rivet.

Fatal errors end the current command; none of them touch git or GitHub
because nothing is written before the user accepts an artifact.
"""

from typing import Any, Dict, List, Optional


class RivetError(Exception):
    """Base class for all errors raised by Rivet."""
    pass


class ConfigurationError(RivetError):
    """No usable credential or backend could be resolved."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class EmptyAnalysisError(RivetError):
    """The analysis turn produced no assistant text."""

    def __init__(self, conversation_structure: Optional[List[Dict[str, Any]]] = None):
        super().__init__("Failed to get analysis from agent")
        self.conversation_structure = conversation_structure or []


class EmptyGenerationError(RivetError):
    """The generation turn produced no assistant text."""

    def __init__(self, what: str = "content",
                 conversation_structure: Optional[List[Dict[str, Any]]] = None):
        super().__init__(f"Failed to extract {what} from agent response")
        self.conversation_structure = conversation_structure or []


class MalformedPayloadError(RivetError):
    """Model output could not be parsed into the expected structure."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class MissingFieldError(MalformedPayloadError):
    """Parsed payload lacks one or more required fields."""

    def __init__(self, fields: List[str], raw_text: str = ""):
        super().__init__(
            f"Agent response missing {' and '.join(fields)}", raw_text=raw_text
        )
        self.fields = fields


class AgentTransportError(RivetError):
    """The agent backend could not be reached or returned an API error."""

    def __init__(self, backend: str, detail: str):
        super().__init__(f"{backend} backend request failed: {detail}")
        self.backend = backend


class RegenerationFailure(RivetError):
    """A regenerate attempt failed; the previous artifact stays current."""
    pass


class NotAGitRepositoryError(RivetError):
    """Raised when the working directory is not inside a git work tree."""
    pass


class NoChangesError(RivetError):
    """Raised when there is nothing to commit or nothing to open a PR for."""
    pass


class GitHubCLIError(RivetError):
    """Raised when the gh CLI is missing or a gh invocation fails."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr
