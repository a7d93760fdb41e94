"""Bind parsed call arguments to a library's declared parameters."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from core.libraries.models import OptionalParameter, Parameter, Variable
from core.utils.errors import ArgumentBindingError


def bind_arguments(
    library: str, parameters: Sequence[Parameter], arguments: Iterable[Variable]
) -> dict[str, str]:
    """Map every declared parameter to a value.

    Named arguments bind first. Positional arguments then fill the parameters
    still unbound, in declaration order. Unbound optional parameters take
    their default.

    Raises:
        ArgumentBindingError: unknown name, duplicate binding, too many
            positional arguments, or a required parameter left unbound.
    """

    declared = {parameter.name for parameter in parameters}
    bound: dict[str, str] = {}
    positional: list[str] = []

    for argument in arguments:
        if not argument.name:
            positional.append(argument.value)
            continue
        if argument.name not in declared:
            raise ArgumentBindingError(
                f"Library '{library}' has no parameter '{argument.name}'",
                library=library,
                reason="unknown_parameter",
            )
        if argument.name in bound:
            raise ArgumentBindingError(
                f"Parameter '{argument.name}' of library '{library}' is bound twice",
                library=library,
                reason="duplicate_binding",
            )
        bound[argument.name] = argument.value

    free = [parameter for parameter in parameters if parameter.name not in bound]
    if len(positional) > len(free):
        raise ArgumentBindingError(
            f"Library '{library}' takes at most {len(free)} positional "
            f"argument(s), got {len(positional)}",
            library=library,
            reason="too_many_positional",
        )
    for parameter, value in zip(free, positional):
        bound[parameter.name] = value

    result: dict[str, str] = {}
    for parameter in parameters:
        if parameter.name in bound:
            result[parameter.name] = bound[parameter.name]
        elif isinstance(parameter, OptionalParameter):
            result[parameter.name] = parameter.default
        else:
            raise ArgumentBindingError(
                f"Missing required parameter '{parameter.name}' of library '{library}'",
                library=library,
                reason="missing_required",
            )
    return result
