"""The picture the shell greets its user with."""

from __future__ import annotations

import re
from typing import TextIO

BLUE = "\033[34m"
RESET = "\033[0m"

# Each row is stored as runs: an optional repeat count followed by a shade
# letter.  '.' is blank, then 'a' to 'd' go from the lightest block to full.
_SHADES = {".": " ", "a": "\u2591", "b": "\u2592", "c": "\u2593", "d": "\u2588"}
_RUN = re.compile(r"(\d*)([.abcd])")

_UPPER = (
    "33.abd3cba4b3cdb2a",
    "30.2ab2dac2dbcd2c5d4ca",
    "29.b2ac2dc17dca",
    "27.aba2bc21db",
    "26.ab2cb2c22da",
    "25.ab2c3dc3d3cb8c7dc",
    "25.ab3c2b2ab2ca2b4a2b4c6d",
    "24.2abcb5a3bab2a5b5c5da",
    "24.a2c3b3ab8a5b6c3dc",
    "25.b2dcb12a5bc2b4c3da.a",
    "26.cdcb10abab2c7d2c3dcb",
    "26.ad2c7ab2c2b13c2dbc2a",
    "27.bdc3abc4d3cb2c4d7c2d2c",
    "27.abd2ab2c5dc2ab3c2dcd5cd3ca",
)

_LOWER = (
    "29.2ba3b3cdc3ab15ca",
    "29.ab13abcb5cb5ca",
    "29.a2b6a2b4abcb11ca",
    "29.7a2b2c2b6cd10ca",
    "31.3a2b3cd2b2c2d4c2d7cdca",
    "32.2a3b3cb5c3b2d8c3d2ca",
    "33.4b2c4d2cb2cd4cdc2d3c7dcba",
    "34.a3b2cb4a2b5c5d4c3d8cb2a",
    "30.a2.3ab3c4b2c2d3c4d7c3d12ca",
    "30.9a2c2b2a2bcb4c2d25cba",
    "25.15abc5b4c2d30c2a",
    "19.22a2bc3dcd16c3dcd5cd7cba",
    "16.26ab16c15d8c2a2ba",
    "14.2a3.14a2b8ab13c15d2cd7c6a",
    "14.a2.15a3b8ab12c15d11cb7a",
    "12.2a.16a3b10ab10c15d10cb9a",
)


def _decode(row: str) -> str:
    return "".join(
        _SHADES[shade] * int(count or 1) for count, shade in _RUN.findall(row)
    )


def _block(rows: tuple[str, ...]) -> str:
    return BLUE + "".join(f"{_decode(row)}\n" for row in rows) + RESET


def billy_banner() -> str:
    """Return the coloured greeting picture exactly as it is printed."""
    return _block(_UPPER) + _block(_LOWER)


def print_banner(out: TextIO) -> None:
    """Write the greeting picture to ``out``."""
    out.write(billy_banner())