"""Entry point for running the conversation exporter as a module.

Usage:
    python -m scripts.polis_export output/ --zid 12
    python -m scripts.polis_export output/ --zid 12 --no-validate
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
