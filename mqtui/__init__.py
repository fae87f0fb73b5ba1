"""Public package surface for mqtui.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``mqtui``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import the CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
