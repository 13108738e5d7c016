"""Entrypoint for ``python -m yeelight_matter_bridge``."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
