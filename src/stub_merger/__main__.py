"""Module entrypoint for ``python -m stub_merger``."""

from __future__ import annotations

from stub_merger.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
