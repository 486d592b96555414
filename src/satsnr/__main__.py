"""``python -m satsnr`` and the ``satsnr`` console script.

Both run :func:`satsnr.cli.main` with the process arguments.
"""

from __future__ import annotations

from satsnr.cli import main as cli_main


def main() -> None:
    cli_main()


if __name__ == "__main__":
    main()
