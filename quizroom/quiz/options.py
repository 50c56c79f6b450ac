from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from quizroom.quiz.errors import OptionsDecodeError


def _option_text(option: Any, position: int) -> str:
    if isinstance(option, str):
        return option
    # Numeric answers such as [1, 2, 3] are stored unquoted by some editors.
    if isinstance(option, (int, float)) and not isinstance(option, bool):
        return str(option)
    raise OptionsDecodeError(f"option {position} must be text, got {type(option).__name__}")


def normalize_options(raw: Any) -> tuple[str, ...]:
    """Return answer options as a tuple of strings.

    Question rows store options either as a native JSON array or as a
    JSON-encoded string of that array; both forms normalize identically.
    Numeric items become their string form; null, boolean or nested items
    are rejected.
    """
    payload = raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            payload = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise OptionsDecodeError(f"options are not valid UTF-8: {exc.reason}") from exc
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise OptionsDecodeError(f"options are not valid JSON: {exc.msg}") from exc

    if payload is None:
        return ()
    if isinstance(payload, str) or not isinstance(payload, Sequence):
        raise OptionsDecodeError(f"options must decode to a list, got {type(payload).__name__}")
    return tuple(_option_text(option, position) for position, option in enumerate(payload))
