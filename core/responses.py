# =============================================================================
# core/responses.py  —  Remote Tool Response Normalization
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   A remote tool answers with an envelope like
#
#       {"content": [{"type": "text", "text": "{\"a\": 1}"},
#                    {"type": "text", "text": "some prose"}]}
#
#   Some tools put JSON in their text parts, some put prose, some mix both.
#   This module folds the parts into ONE dict so the agent always gets
#   something it can read:
#
#       {"a": 1, "text": "some prose"}
#
# THE FOLD RULES:
#   - Start from {} and walk the parts in order.
#   - A text part whose text parses as a JSON object is shallow-merged in
#     (later keys overwrite earlier ones).
#   - Any other text part contributes {"text": <raw text>}, overwriting a
#     previous "text" key.
#   - Non-text parts are skipped.
#
#   No envelope → None.  An envelope without a content list is returned
#   exactly as it came in.
# =============================================================================

import json
from collections.abc import Mapping
from typing import Any

from core.models import CallEnvelope, ContentPart, OtherPart, TextPart


def parse_envelope(raw: Any) -> CallEnvelope | None:
    """Turn a loosely-typed response into a CallEnvelope.

    Returns None for a missing or empty response.
    """
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        return CallEnvelope(raw=raw)

    content = raw.get("content")
    if not isinstance(content, (list, tuple)):
        return CallEnvelope(raw=raw)
    return CallEnvelope(raw=raw, content=tuple(_parse_part(item) for item in content))


def _parse_part(item: Any) -> ContentPart:
    if not isinstance(item, Mapping):
        return OtherPart(type="unknown")

    part_type = item.get("type")
    if part_type == "text":
        text = item.get("text")
        if text is None:
            text = ""
        return TextPart(text=text if isinstance(text, str) else str(text))
    return OtherPart(type=str(part_type), payload=item)


def normalize_result(envelope: CallEnvelope | None) -> Any:
    """Fold an envelope's parts into a single dict (see module header)."""
    if envelope is None:
        return None
    if envelope.content is None:
        return envelope.raw

    result: dict[str, Any] = {}
    for part in envelope.content:
        if isinstance(part, TextPart):
            result.update(_fold_text(part.text))
        elif isinstance(part, OtherPart):
            continue
    return result


def normalize_response(raw: Any) -> Any:
    """parse_envelope() followed by normalize_result()."""
    return normalize_result(parse_envelope(raw))


def _fold_text(text: str) -> dict[str, Any]:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return {"text": text}
    # Only objects have fields to merge; scalars and arrays stay as raw text.
    if isinstance(parsed, dict):
        return parsed
    return {"text": text}
