# drizzle_gen/utils/casing.py
"""Case conversion helpers shared by the encoder and the decoder."""

import re

_SEPARATORS = re.compile(r"[_-]+")
_UPPER = re.compile(r"[A-Z]")


def pascal_case(value: str) -> str:
    """Convert ``snake_case`` / ``kebab-case`` text to PascalCase.

    Each word is capitalised and the rest of it lower-cased, so mixed-case
    input such as ``inProgress`` collapses to ``Inprogress``.
    """
    parts = []
    for part in _SEPARATORS.split(value):
        words = [w[:1].upper() + w[1:].lower() for w in part.split(" ")]
        parts.append(" ".join(words))
    return "".join(parts)


def snake_case(value: str) -> str:
    """Convert camelCase / PascalCase text to snake_case."""
    if not value:
        return ""

    def _replace(match: re.Match) -> str:
        prefix = "_" if match.start() > 0 else ""
        return prefix + match.group(0).lower()

    return _UPPER.sub(_replace, value)
