"""Effective prompt resolution for the upload route.

The prompt sent to the model is decided from two inputs: the text the user
typed and the number of images uploaded.

Rules
-----
- A user prompt always wins.  It is stripped first; an empty string and the
  literals ``"null"`` and ``"undefined"`` (what a browser form sends for an
  unset value) count as no prompt.
- With no user prompt and **more than one** image, a fixed merge
  instruction is used so the model blends the images into one.
- Otherwise the prompt is empty and the images are sent on their own.

Usage
-----
::

    resolve_prompt("  add a hat  ", image_count=1)   # "add a hat"
    resolve_prompt("", image_count=2)                # DEFAULT_MERGE_PROMPT
    resolve_prompt(None, image_count=1)              # ""
"""

from __future__ import annotations

DEFAULT_MERGE_PROMPT = (
    "Merge the provided images into a single cohesive image. Blend them naturally, "
    "align perspectives, and harmonize colors. Return only the merged image."
)

_EMPTY_PROMPT_LITERALS = frozenset({"null", "undefined"})


def clean_prompt(raw: str | None) -> str:
    """Return the user's prompt stripped, or ``""`` when there is none."""
    if not isinstance(raw, str):
        return ""
    text = raw.strip()
    if text in _EMPTY_PROMPT_LITERALS:
        return ""
    return text


def resolve_prompt(raw: str | None, image_count: int) -> str:
    """Compile the effective prompt for a request.

    Args:
        raw: Prompt field as received (may be ``None``).
        image_count: Number of images in the request.

    Returns:
        The user prompt, the default merge prompt, or ``""``.
    """
    user_prompt = clean_prompt(raw)
    if user_prompt:
        return user_prompt
    if image_count > 1:
        return DEFAULT_MERGE_PROMPT
    return ""
