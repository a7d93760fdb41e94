"""Library definition producers and the host they execute code against."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from core.libraries.models import LibraryDefinition
from core.utils.events import log_event

logger = logging.getLogger("libresolve.libraries")


class Host(Protocol):
    """Executes code fragments. Threading and timeouts are owned by the host."""

    def execute_init(self, codes: Sequence[str]) -> None:
        """Run fragments for their side effects only."""

    def execute(self, code: str) -> object:
        """Run one fragment and return whatever it evaluates to."""


@runtime_checkable
class LibraryDefinitionProducer(Protocol):
    """Unit of work that yields zero or more definitions given a host."""

    def produce(self, host: Host | None) -> list[LibraryDefinition]:
        """Return definitions in a stable order."""


@dataclass(frozen=True)
class DefinitionResult:
    definition: LibraryDefinition


@dataclass(frozen=True)
class ProducerResult:
    producer: LibraryDefinitionProducer


@dataclass(frozen=True)
class OtherResult:
    value: object


ExecutionResult = DefinitionResult | ProducerResult | OtherResult


def classify_execution_result(value: object) -> ExecutionResult:
    """Tag a raw host result as a definition, a producer, or anything else."""

    if isinstance(value, LibraryDefinition):
        return DefinitionResult(value)
    if isinstance(value, LibraryDefinitionProducer):
        return ProducerResult(value)
    return OtherResult(value)


class TrivialLibraryDefinitionProducer:
    """Wraps one ready definition; the host is not consulted."""

    def __init__(self, library: LibraryDefinition) -> None:
        self._library = library

    def produce(self, host: Host | None) -> list[LibraryDefinition]:
        return [self._library]


class ResolvingLibraryDefinitionProducer:
    """Runs init code, then definition code, collecting what the code yields.

    Fragments run strictly in order because later fragments may depend on the
    side effects of earlier ones.
    """

    def __init__(self, init_codes: Sequence[str], codes: Sequence[str]) -> None:
        self._init_codes = tuple(init_codes)
        self._codes = tuple(codes)

    def produce(self, host: Host | None) -> list[LibraryDefinition]:
        if host is None:
            return []

        host.execute_init(self._init_codes)
        log_event(logger, logging.DEBUG, "init_code_executed", fragments=len(self._init_codes))

        definitions: list[LibraryDefinition] = []
        for code in self._codes:
            result = classify_execution_result(host.execute(code))
            if isinstance(result, DefinitionResult):
                definitions.append(result.definition)
            elif isinstance(result, ProducerResult):
                definitions.extend(result.producer.produce(host))

        log_event(
            logger,
            logging.DEBUG,
            "definition_code_executed",
            fragments=len(self._codes),
            definitions=len(definitions),
        )
        return definitions


def collect_definitions(
    producers: Iterable[LibraryDefinitionProducer], host: Host | None
) -> list[LibraryDefinition]:
    """Concatenate every producer's output in list order, without deduplication."""

    definitions: list[LibraryDefinition] = []
    for producer in producers:
        definitions.extend(producer.produce(host))
    return definitions
