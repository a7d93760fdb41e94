"""Switch the fallback descriptor resolution strategy by mode.

Neither class locks: one resolution session owns a provider and its
switcher, and callers that switch modes from several threads must serialize
access themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar

from core.libraries.models import ByDirectory, ByGitReference, LibraryResolutionInfo
from core.utils.events import log_event

logger = logging.getLogger("libresolve.libraries")

T = TypeVar("T")


class DefaultInfoSwitch(Enum):
    GIT_REFERENCE = "git_reference"
    DIRECTORY = "directory"


class ResolutionInfoProvider:
    """Shared cell holding the resolution info used when a call names none."""

    def __init__(self, fallback: LibraryResolutionInfo) -> None:
        self.fallback = fallback


class DefaultInfoSwitcher(Generic[T]):
    """Memoizes one resolution info per mode and publishes the active one.

    ``builder`` runs at most once per distinct mode. Every mode change writes
    the cached info into ``provider.fallback``.
    """

    def __init__(
        self,
        provider: ResolutionInfoProvider,
        initial_mode: T,
        builder: Callable[[T], LibraryResolutionInfo],
    ) -> None:
        self._provider = provider
        self._builder = builder
        self._cache: dict[T, LibraryResolutionInfo] = {}
        self._mode = initial_mode

    @property
    def mode(self) -> T:
        return self._mode

    @mode.setter
    def mode(self, value: T) -> None:
        self.set_mode(value)

    def set_mode(self, mode: T) -> None:
        if mode not in self._cache:
            self._cache[mode] = self._builder(mode)
        self._provider.fallback = self._cache[mode]
        self._mode = mode
        log_event(logger, logging.DEBUG, "fallback_switched", mode=str(mode))

    @classmethod
    def default(
        cls,
        provider: ResolutionInfoProvider,
        default_dir: Path,
        default_ref: str,
    ) -> DefaultInfoSwitcher[DefaultInfoSwitch]:
        """Switch between a local directory and a remote reference.

        An info of the matching kind already active in ``provider`` wins over
        the supplied defaults.
        """

        initial = provider.fallback
        dir_info = initial if isinstance(initial, ByDirectory) else ByDirectory(default_dir)
        ref_info = initial if isinstance(initial, ByGitReference) else ByGitReference(default_ref)

        def _build(mode: DefaultInfoSwitch) -> LibraryResolutionInfo:
            if mode is DefaultInfoSwitch.DIRECTORY:
                return dir_info
            return ref_info

        return cls(provider, DefaultInfoSwitch.DIRECTORY, _build)
