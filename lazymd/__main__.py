"""Module entrypoint for ``python -m lazymd``.

All argument parsing and runtime setup happen in ``lazymd.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
