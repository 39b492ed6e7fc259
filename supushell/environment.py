"""Shell environment variables, kept in the order the shell reports them."""

from __future__ import annotations

from collections.abc import Iterable


class Environment:
    """Ordered environment variables; variables added later go to the front."""

    def __init__(self, items: Iterable[tuple[str, str | None]] = ()) -> None:
        self._vars: dict[str, str | None] = {}
        for key, value in items:
            # The first occurrence of a key wins, as a lookup would find it first.
            self._vars.setdefault(key, value)

    @classmethod
    def from_envp(cls, envp: Iterable[str]) -> Environment:
        """Build from ``KEY=VALUE`` strings; the last entry ends up first."""
        pairs = []
        for entry in envp:
            key, sep, value = entry.partition("=")
            if not sep:
                raise ValueError(f"environment entry without '=': {entry!r}")
            pairs.append((key, value))
        return cls(reversed(pairs))

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None when it is not set."""
        return self._vars.get(key)

    def set(self, key: str, value: str | None) -> None:
        """Update ``key`` in place, or add it at the front when it is new."""
        if key in self._vars:
            self._vars[key] = value
        else:
            self._vars = {key: value, **self._vars}

    def unset(self, key: str) -> None:
        """Remove ``key``; removing a missing key does nothing."""
        self._vars.pop(key, None)

    def items(self) -> list[tuple[str, str | None]]:
        """Return the variables as ``(key, value)`` pairs in order."""
        return list(self._vars.items())

    def to_envp(self) -> list[str]:
        """Return ``KEY=VALUE`` strings for every variable that has a value."""
        return [f"{key}={value}" for key, value in self._vars.items() if value is not None]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.items()!r})"


def parse_export_argument(arg: str) -> tuple[str, str]:
    """Split an ``export`` argument ``KEY=VALUE`` at its first ``=``."""
    key, sep, value = arg.partition("=")
    if not sep:
        raise ValueError(f"invalid format: {arg}")
    return key, value