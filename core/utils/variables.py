"""``${var}`` placeholder substitution.

Rules:
- Placeholder format is exactly ``${NAME}`` where NAME allows letters, digits,
  underscore, dot and dash.
- Substitution is single pass; inserted values are never re-scanned.
- In strict mode (the default) an unmapped placeholder raises
  ``MissingVariableError``; otherwise it is left verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from core.utils.errors import MissingVariableError

_VARIABLE_RE = re.compile(r"\$\{([A-Za-z0-9_.\-]+)\}")


def find_variables(text: str) -> list[str]:
    """Return placeholder names in first-occurrence order without duplicates."""

    names: list[str] = []
    seen: set[str] = set()
    for match in _VARIABLE_RE.finditer(text):
        name = match.group(1)
        if name not in seen:
            names.append(name)
            seen.add(name)
    return names


def replace_variables(text: str, mapping: Mapping[str, str], *, strict: bool = True) -> str:
    """Replace every ``${name}`` in ``text`` with ``mapping[name]``.

    Args:
        text: Source string.
        mapping: Variable name to value mapping.
        strict: When True, raise MissingVariableError if any placeholder has
            no mapping entry. When False, leave such placeholders untouched.

    Returns:
        The substituted string.
    """

    if strict:
        missing = [name for name in find_variables(text) if name not in mapping]
        if missing:
            raise MissingVariableError(
                f"Unresolved variables {missing} in '{text}'",
                missing=missing,
                text=text,
            )

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in mapping:
            return mapping[name]
        return match.group(0)

    return _VARIABLE_RE.sub(_substitute, text)
