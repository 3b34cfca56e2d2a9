"""Console utilities for TaskFlow CLI."""

import os
from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Get a Rich Console instance for consistent output formatting."""
    return Console(highlight=highlight)


def apply_color_setting(color: bool) -> None:
    """Turn colour output on or off for every shared console.

    A set ``NO_COLOR`` environment variable still wins when *color* is true.
    """
    no_color = not color or os.environ.get("NO_COLOR", "") != ""
    for highlight in (True, False):
        get_console(highlight).no_color = no_color
