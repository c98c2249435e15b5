"""
Normalization of model responses into plain text.

The inference service answers with different shapes depending on the
provider, model and API version. :func:`extract_text` is the single place
that absorbs that variability; it tries each known shape in order and
falls back to a structural dump of the response.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable, Optional

from recall_agent.config.core import EMPTY_RESPONSE_TEXT

_ITEM_TEXT_FIELDS = ("text", "content", "output_text")


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute (SDK models)."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _as_text(value: Any) -> str:
    """Return string values as-is and flatten lists of content parts."""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "".join(_item_text(part) for part in value)
    return ""


def _item_text(item: Any) -> str:
    """Text of the first field the item carries; an empty value is not skipped over."""
    for name in _ITEM_TEXT_FIELDS:
        value = _field(item, name)
        if value is not None:
            return _as_text(value)
    return ""


def _plain_string(resp: Any) -> Optional[str]:
    return resp if isinstance(resp, str) else None


def _response_field(resp: Any) -> Optional[str]:
    value = _field(resp, "response")
    return value if isinstance(value, str) else None


def _result_output_text(resp: Any) -> Optional[str]:
    result = _field(resp, "result")
    if result is None:
        return None
    value = _field(result, "output_text")
    return value if isinstance(value, str) and value else None


def _output_items(resp: Any) -> Optional[str]:
    items = _field(resp, "output")
    if not isinstance(items, (list, tuple)):
        return None
    parts = [text for text in (_item_text(item) for item in items) if text]
    return "\n".join(parts) or None


# Ordered: the first extractor returning a string wins.
EXTRACTORS: tuple[Callable[[Any], Optional[str]], ...] = (
    _plain_string,
    _response_field,
    _result_output_text,
    _output_items,
)


def _dump(resp: Any) -> str:
    if hasattr(resp, "model_dump_json"):
        return resp.model_dump_json()
    if isinstance(resp, (Mapping, list, tuple)):
        return json.dumps(resp, default=str, ensure_ascii=False)
    return str(resp)


def extract_text(resp: Any) -> str:
    """Return the plain text carried by a model response of any known shape."""
    if not resp:
        return EMPTY_RESPONSE_TEXT
    for extractor in EXTRACTORS:
        text = extractor(resp)
        if text is not None:
            return text
    return _dump(resp)
