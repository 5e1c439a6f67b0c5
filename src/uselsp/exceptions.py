"""Error taxonomy for the USE script language server."""

from __future__ import annotations

from typing import Mapping


class UseLspError(RuntimeError):
    """Root of every error raised by uselsp."""


class ConfigurationFault(UseLspError):
    """A rule or completion table is broken; the server must not start.

    Raised only while the static tables are being built, never per request.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.env:
            return base
        details = ", ".join(f"{key}={value!r}" for key, value in self.env.items())
        return f"{base} ({details})"


class UnresolvedEntry(UseLspError, LookupError):
    """`resolve()` was asked for an id the resolution table does not hold."""

    def __init__(self, entry_id: object):
        super().__init__(f"no completion resolution for id {entry_id!r}")
        self.entry_id = entry_id


class MalformedRange(UseLspError, ValueError):
    def __init__(self, start: int, end: int, length: int):
        super().__init__(
            f"offset range [{start}, {end}) falls outside text of length {length}"
        )
        self.start = start
        self.end = end
        self.length = length


class NeverThrown(UseLspError):
    """Raised by `never()`; reaching it means an invariant was broken."""

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})
