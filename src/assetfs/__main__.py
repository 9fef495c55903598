"""Entry point for `python -m assetfs` and the `assetfs` console script."""

from __future__ import annotations

from assetfs.cli import main

if __name__ == "__main__":
    main()
