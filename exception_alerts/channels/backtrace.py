"""Backtrace cleaning: rewrite and silence frames before they reach a message."""

import os
import re
import sysconfig
from typing import Callable, Iterable, Optional

from exception_alerts.channels import ExceptionInfo

Filter = Callable[[str], str]
Silencer = Callable[[str], bool]

_THIRD_PARTY = re.compile(r"[/\\](site|dist)-packages[/\\]")


def _stdlib_prefixes() -> tuple[str, ...]:
    paths = sysconfig.get_paths()
    prefixes = {paths.get("stdlib"), paths.get("platstdlib")}
    return tuple(p for p in prefixes if p)


def is_third_party_frame(line: str) -> bool:
    """Frame lives in an installed distribution."""
    return bool(_THIRD_PARTY.search(line))


def is_stdlib_frame(line: str) -> bool:
    """Frame lives in the interpreter's standard library."""
    return not is_third_party_frame(line) and line.startswith(_stdlib_prefixes())


class BacktraceCleaner:
    """
    Applies line filters, then silencers, to a raw backtrace.

    Filters rewrite each line (e.g. strip the project root). Silencers then
    drop rewritten lines. Frame order is never changed. When every frame is
    silenced the whole raw backtrace is kept instead of an empty one.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        filters: Iterable[Filter] = (),
        silencers: Iterable[Silencer] = (),
        default_silencers: bool = True,
    ):
        self._filters: list[Filter] = []
        self._silencers: list[Silencer] = []

        if root:
            self.add_root_filter(root)
        self._filters.extend(filters)

        if default_silencers:
            self._silencers.extend([is_third_party_frame, is_stdlib_frame])
        self._silencers.extend(silencers)

    def add_filter(self, fn: Filter) -> None:
        self._filters.append(fn)

    def add_silencer(self, fn: Silencer) -> None:
        self._silencers.append(fn)

    def remove_silencers(self) -> None:
        self._silencers.clear()

    def add_root_filter(self, root: str) -> None:
        prefix = root.rstrip(os.sep) + os.sep

        def strip_root(line: str) -> str:
            return line[len(prefix):] if line.startswith(prefix) else line

        self._filters.append(strip_root)

    def clean(self, exception: ExceptionInfo) -> list[str]:
        if exception.backtrace is None:
            raise ValueError(f"{exception.class_name} carries no backtrace")

        raw = list(exception.backtrace)
        filtered = [self._apply_filters(line) for line in raw]
        kept = [line for line in filtered if not any(s(line) for s in self._silencers)]
        return kept or raw

    def _apply_filters(self, line: str) -> str:
        for fn in self._filters:
            line = fn(line)
        return line
