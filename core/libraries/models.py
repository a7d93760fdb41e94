"""Data models for library calls, parameters, resolution info and descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Variable:
    """One parsed call argument. Positional arguments have an empty name."""

    name: str
    value: str


@dataclass(frozen=True)
class ArgParseResult:
    """Single-argument scan output: the argument and where scanning resumes."""

    variable: Variable
    end: int


class ParsedCall(NamedTuple):
    """Library name plus its arguments in source order."""

    name: str
    arguments: tuple[Variable, ...] = ()


@dataclass(frozen=True)
class Brackets:
    """Open/close characters delimiting a call's argument list."""

    open: str
    close: str

    ROUND: ClassVar[Brackets]
    SQUARE: ClassVar[Brackets]


Brackets.ROUND = Brackets("(", ")")
Brackets.SQUARE = Brackets("[", "]")


@dataclass(frozen=True)
class RequiredParameter:
    """Formal parameter that must be bound by the call."""

    name: str

    @property
    def default(self) -> str | None:
        return None


@dataclass(frozen=True)
class OptionalParameter:
    """Formal parameter that falls back to ``default`` when unbound."""

    name: str
    default: str


Parameter = RequiredParameter | OptionalParameter


@dataclass(frozen=True)
class ByDirectory:
    """Resolve descriptors from a local directory."""

    path: Path


@dataclass(frozen=True)
class ByGitReference:
    """Resolve descriptors from a remote branch, tag or commit reference."""

    ref: str
    timestamp: str | None = None


LibraryResolutionInfo = ByDirectory | ByGitReference


@dataclass(frozen=True)
class LibraryDefinition:
    """Materialized library: what to add to the classpath and what to run."""

    repositories: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()
    init: tuple[str, ...] = ()
    init_cell: tuple[str, ...] = ()
    shutdown: tuple[str, ...] = ()


class LibraryDescriptor(BaseModel):
    """Library descriptor decoded from JSON.

    Unknown keys are ignored because the descriptor format is owned by the
    descriptor repository, not by this package.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    description: str | None = None
    link: str | None = None
    min_kernel_version: str | None = Field(default=None, alias="minKernelVersion")
    properties: dict[str, str] = Field(default_factory=dict)
    repositories: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)
    init: list[str] = Field(default_factory=list)
    init_cell: list[str] = Field(default_factory=list, alias="initCell")
    shutdown: list[str] = Field(default_factory=list)

    def parameters(self) -> list[Parameter]:
        """Declared parameters in declaration order; an empty default means required."""

        parameters: list[Parameter] = []
        for name, default in self.properties.items():
            if default == "":
                parameters.append(RequiredParameter(name))
            else:
                parameters.append(OptionalParameter(name, default))
        return parameters

    def to_definition(self) -> LibraryDefinition:
        return LibraryDefinition(
            repositories=tuple(self.repositories),
            dependencies=tuple(self.dependencies),
            imports=tuple(self.imports),
            init=tuple(self.init),
            init_cell=tuple(self.init_cell),
            shutdown=tuple(self.shutdown),
        )
