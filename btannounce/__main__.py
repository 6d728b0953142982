"""Entry point for ``python -m btannounce``."""

from __future__ import annotations

from btannounce.cli.main import main

if __name__ == "__main__":
    main()
