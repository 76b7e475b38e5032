"""Turn raw generation output into validated artifacts."""

import json
from typing import Any, List

from .conversation import extract_json
from .errors import EmptyGenerationError, MalformedPayloadError, MissingFieldError
from .models import PrData


def parse_commit_message(text: str) -> str:
    """A commit artifact is the trimmed generation text itself."""
    message = (text or "").strip()
    if not message:
        raise EmptyGenerationError("commit message")
    return message


def _coerce_labels(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [str(label).strip() for label in value if str(label).strip()]
    return []


def parse_pr_payload(text: str) -> PrData:
    """Recover, deserialize and validate a PR payload.

    Args:
        text: Raw model output, possibly wrapped in prose or a code fence

    Returns:
        PrData with labels defaulting to an empty list

    Raises:
        MalformedPayloadError: If no JSON object can be decoded
        MissingFieldError: If title or body is absent or blank
    """
    json_text = extract_json(text or "")
    try:
        data = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedPayloadError(
            f"Failed to parse agent response as JSON: {e}", raw_text=text or ""
        ) from e

    if not isinstance(data, dict):
        raise MalformedPayloadError(
            "Agent response is not a JSON object", raw_text=text or ""
        )

    title = data.get('title')
    body = data.get('body')
    missing = []
    if not isinstance(title, str) or not title.strip():
        missing.append('title')
    if not isinstance(body, str) or not body.strip():
        missing.append('body')
    if missing:
        raise MissingFieldError(missing, raw_text=text or "")

    return PrData(
        title=title.strip(),
        body=body.strip(),
        labels=_coerce_labels(data.get('labels')),
    )
