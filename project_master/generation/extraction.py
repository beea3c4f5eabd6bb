"""Best-effort recovery of a JSON array from model output.

Models are asked for a bare JSON array but often wrap it in prose or a
markdown fence. The array boundary is found by decoding, not by regex:
``json.JSONDecoder.raw_decode`` is attempted at each ``[`` in turn, so
brackets nested in objects or quoted inside strings never cut the array
short. The first array of objects wins, else the first array of any kind.
"""

import json
import re
from typing import Any

from project_master.core.exceptions import ResponseParseError

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_DECODER = json.JSONDecoder()


def extract_json_array(text: str) -> list[Any]:
    """
    Extract the first well-formed JSON array from ``text``.

    Tries, in order: the whole text, the contents of each fenced code
    block, then a left-to-right scan of every ``[`` position.

    Args:
        text: Raw model output.

    Returns:
        The decoded list.

    Raises:
        ResponseParseError: If no JSON array can be decoded.

    Example:
        >>> extract_json_array('Here you go: [{"title": "a [b]"}] Enjoy!')
        [{'title': 'a [b]'}]
    """
    stripped = text.strip()
    if not stripped:
        raise ResponseParseError("Empty response from completion service")

    direct = _try_load_list(stripped)
    if direct is not None:
        return direct

    for match in _FENCED_BLOCK.finditer(stripped):
        fenced = _try_load_list(match.group(1))
        if fenced is not None:
            return fenced

    scanned = _scan_for_list(stripped)
    if scanned is not None:
        return scanned

    raise ResponseParseError(
        "No JSON array found in completion response",
        details={"preview": stripped[:200]},
    )


def _try_load_list(raw: str) -> list[Any] | None:
    try:
        parsed = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(parsed, list):
        return None
    return parsed


def _scan_for_list(text: str) -> list[Any] | None:
    # Prefer the first array of objects; stray "[1]" style citations in prose
    # are only used when no such array exists.
    first: list[Any] | None = None
    start = text.find("[")
    while start != -1:
        try:
            parsed, _ = _DECODER.raw_decode(text, start)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            if parsed and all(isinstance(item, dict) for item in parsed):
                return parsed
            if first is None:
                first = parsed
        start = text.find("[", start + 1)
    return first
