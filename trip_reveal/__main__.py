"""Module entry point: python -m trip_reveal ..."""

from __future__ import annotations

from trip_reveal.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
