"""Package entry point.

Preferred invocation is via the installed console script:

    csv-profiler ...

For convenience we also support:

    python -m csv_profiler ...
"""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Entry point used by `python -m csv_profiler`."""

    app()


if __name__ == "__main__":
    main()
