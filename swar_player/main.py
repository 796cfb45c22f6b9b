"""Console-script entrypoint (``swar-player``)."""
from __future__ import annotations

import sys

import app


def main(argv: list[str] | None = None) -> None:
    app.launch(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    main()
