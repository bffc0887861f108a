"""Module entrypoint for running Reel Studio as ``python -m reelstudio``."""

from __future__ import annotations

from reelstudio.cli import main


if __name__ == "__main__":
    main()
