"""Resolution pipeline: invocation string -> definitions -> injected code."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from core.libraries.arguments import bind_arguments
from core.libraries.call_parser import parse_library_name
from core.libraries.injection import build_dependencies_init_code
from core.libraries.models import LibraryDefinition, LibraryDescriptor
from core.libraries.producers import (
    Host,
    LibraryDefinitionProducer,
    TrivialLibraryDefinitionProducer,
    collect_definitions,
)
from core.repl.properties import ReplProperties
from core.utils.errors import LibraryNotFoundError
from core.utils.events import log_event
from core.utils.variables import replace_variables

logger = logging.getLogger("libresolve.pipeline")


@dataclass
class ResolvedLibrary:
    """One resolved invocation with its bound arguments and injection code.

    ``init_code`` holds one entry per definition that contributes any
    repository, dependency or import, in definition order.
    """

    name: str
    arguments: dict[str, str] = field(default_factory=dict)
    definitions: list[LibraryDefinition] = field(default_factory=list)
    init_code: list[str] = field(default_factory=list)


def resolve_invocation(
    text: str,
    descriptors: Mapping[str, LibraryDescriptor],
    *,
    host: Host | None = None,
    extra_producers: Sequence[LibraryDefinitionProducer] = (),
    strict: bool = True,
) -> ResolvedLibrary:
    """Execute parse -> lookup -> bind -> produce -> build code for one invocation."""

    name, arguments = parse_library_name(text)
    descriptor = descriptors.get(name)
    if descriptor is None:
        raise LibraryNotFoundError(name)

    mapping = bind_arguments(name, descriptor.parameters(), arguments)
    producers: list[LibraryDefinitionProducer] = [
        TrivialLibraryDefinitionProducer(descriptor.to_definition()),
        *extra_producers,
    ]
    definitions = collect_definitions(producers, host)

    init_code: list[str] = []
    for definition in definitions:
        code = build_dependencies_init_code(definition, mapping, strict=strict)
        if code is not None:
            init_code.append(code)

    log_event(
        logger,
        logging.INFO,
        "library_resolved",
        name=name,
        definitions=len(definitions),
        code_fragments=len(init_code),
    )
    return ResolvedLibrary(
        name=name,
        arguments=mapping,
        definitions=definitions,
        init_code=init_code,
    )


def resolve_invocations(
    texts: Iterable[str],
    descriptors: Mapping[str, LibraryDescriptor],
    *,
    host: Host | None = None,
    strict: bool = True,
) -> list[ResolvedLibrary]:
    """Resolve several invocations, preserving their order."""

    return [
        resolve_invocation(text, descriptors, host=host, strict=strict) for text in texts
    ]


def queue_on_load(
    properties: ReplProperties, resolved: Iterable[ResolvedLibrary]
) -> ReplProperties:
    """Queue each library's injection code, then its definitions' init code.

    Init code may use host-language string templates, so placeholders without
    a bound argument are left as they are.
    """

    for library in resolved:
        properties.code_on_load(library.init_code)
        for definition in library.definitions:
            properties.code_on_load(
                replace_variables(code, library.arguments, strict=False)
                for code in definition.init
            )
    return properties
