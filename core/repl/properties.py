"""Properties used to create a REPL: classpath, code run on load and output limits.

Set values by chaining, e.g. ``properties.output_dir(path).shorten_types(False)``,
and read them back through the ``get_*`` accessors.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable


class ReplProperties:
    def __init__(self, receiver: object | None = None) -> None:
        self._receiver = receiver
        self._classpath: set[str] = {entry for entry in sys.path if entry}
        self._code_on_load: list[str] = []
        self._output_dir: str | None = None
        self._max_result = 1000
        self._shorten_types = True

    def receiver(self, receiver: object) -> ReplProperties:
        self._receiver = receiver
        return self

    def class_path(self, path: str | Iterable[str]) -> ReplProperties:
        if isinstance(path, str):
            self._classpath.add(path)
        else:
            self._classpath.update(path)
        return self

    def code_on_load(self, code: str | Iterable[str]) -> ReplProperties:
        if isinstance(code, str):
            self._code_on_load.append(code)
        else:
            self._code_on_load.extend(code)
        return self

    def output_dir(self, output_dir: str) -> ReplProperties:
        self._output_dir = output_dir
        return self

    def max_result(self, max_result: int) -> ReplProperties:
        if max_result <= 0:
            raise ValueError(f"max_result must be positive, got {max_result}")
        self._max_result = max_result
        return self

    def shorten_types(self, shorten_types: bool) -> ReplProperties:
        self._shorten_types = shorten_types
        return self

    def get_receiver(self) -> object | None:
        return self._receiver

    def get_classpath(self) -> frozenset[str]:
        return frozenset(self._classpath)

    def get_code_on_load(self) -> list[str]:
        return list(self._code_on_load)

    def get_output_dir(self) -> str | None:
        return self._output_dir

    def get_max_result(self) -> int:
        return self._max_result

    def get_shorten_types(self) -> bool:
        return self._shorten_types
