"""Entry point: python -m wadrun"""

from __future__ import annotations

from wadrun.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
