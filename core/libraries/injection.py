"""Build the dependency/repository/import code injected for a definition."""

from __future__ import annotations

from collections.abc import Mapping

from core.libraries.models import LibraryDefinition
from core.utils.variables import replace_variables


def build_dependencies_init_code(
    definition: LibraryDefinition,
    mapping: Mapping[str, str] | None = None,
    *,
    strict: bool = True,
) -> str | None:
    """Render one line per repository, dependency and import.

    Every entry goes through ``${var}`` substitution first. Returns None when
    the definition contributes nothing, so callers can skip injection.

    Raises:
        MissingVariableError: an entry references a variable absent from
            ``mapping`` and ``strict`` is set.
    """

    variables = mapping or {}

    def _substitute(value: str) -> str:
        return replace_variables(value, variables, strict=strict)

    lines: list[str] = []
    lines.extend(f'@file:Repository("{_substitute(item)}")' for item in definition.repositories)
    lines.extend(f'@file:DependsOn("{_substitute(item)}")' for item in definition.dependencies)
    lines.extend(f"import {_substitute(item)}" for item in definition.imports)

    if not lines:
        return None
    return "".join(f"{line}\n" for line in lines)
