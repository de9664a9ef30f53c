"""
Response Classifier

Maps the coarse answer a learner gives ("forgot", "hard", "good", "easy")
to the 0-5 quality scale consumed by the scheduler.

Unrecognized responses are rejected with InvalidInput. There is no fallback
quality: guessing one would silently reschedule the card.
"""

from __future__ import annotations
from typing import Union

from recall.errors import InvalidInput
from recall.sm2.constants import QUALITY_BY_RESPONSE, SUCCESS_THRESHOLD, Response


def parse_response(raw: Union[Response, str]) -> Response:
    """
    Convert a raw response tag into a Response.

    Strings are matched case-insensitively with surrounding whitespace
    ignored, since they usually come straight from a request body.

    Raises:
        InvalidInput: if the value is not a known response
    """
    if isinstance(raw, Response):
        return raw
    if not isinstance(raw, str):
        raise InvalidInput(f"Response must be a string, got {type(raw).__name__}")

    try:
        return Response(raw.strip().lower())
    except ValueError:
        valid = ", ".join(r.value for r in Response)
        raise InvalidInput(f"Unknown response {raw!r} (expected one of: {valid})") from None


def classify(response: Union[Response, str]) -> int:
    """
    Map a response to its SM-2 quality.

    FORGOT -> 0, HARD -> 3, GOOD -> 4, EASY -> 5

    HARD is the weakest passing grade: it still counts as a success for
    interval growth. Only FORGOT is a failure.
    """
    return QUALITY_BY_RESPONSE[parse_response(response)]


def is_success(quality: int) -> bool:
    """A review succeeds when quality reaches the threshold (3)."""
    return quality >= SUCCESS_THRESHOLD
