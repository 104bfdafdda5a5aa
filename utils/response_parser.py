"""Recover a JSON object from a free-form model completion.

Models wrap their answer in markdown fences, prose, or both. Candidates are
tried in order:

1. the inner text of a ```json fenced block (tag optional, case-insensitive)
2. the greedy span from the first ``{`` to the last ``}``

A malformed candidate is reported, never repaired.
"""
import json
import re
from typing import Any, Dict, Optional

from errors import MalformedJson, NoJsonFound


FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
JSON_SPAN = re.compile(r"\{[\s\S]*\}")


def find_json_candidate(text: str) -> Optional[str]:
    text = text or ""
    fenced = FENCED_BLOCK.search(text)
    if fenced:
        return fenced.group(1).strip()

    loose = JSON_SPAN.search(text)
    if loose:
        return loose.group(0)

    # an object that was opened but never closed is still a (broken) candidate
    start = text.find("{")
    if start != -1:
        return text[start:]
    return None


def parse_json_object(candidate: str) -> Dict[str, Any]:
    try:
        data = json.loads(candidate)
    except ValueError as exc:
        raise MalformedJson(str(exc), candidate) from exc
    if not isinstance(data, dict):
        raise MalformedJson(f"expected a JSON object, got {type(data).__name__}", candidate)
    return data


def extract_json(completion_text: str) -> Dict[str, Any]:
    """Return the JSON object embedded in ``completion_text``.

    Raises:
        NoJsonFound: no candidate could be located
        MalformedJson: the candidate is not a valid JSON object
    """
    candidate = find_json_candidate(completion_text)
    if not candidate:
        raise NoJsonFound(completion_text)
    return parse_json_object(candidate)
