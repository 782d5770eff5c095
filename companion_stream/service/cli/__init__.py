"""Companion CLI (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no backend logic directly.
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_chat, handle_models
from .cli_parser import build_parser

SUBCOMMANDS = ("chat", "models")


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    The ``chat`` subcommand is injected when no subcommand is given, so
    ``companion-cli --prompt hi`` works; ``companion-cli models`` lists the
    backend's models.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    p = build_parser()
    argv_list = list(sys.argv[1:] if argv is None else argv)
    if not argv_list or argv_list[0] not in SUBCOMMANDS:
        if argv_list[:1] not in (["-h"], ["--help"]):
            argv_list = ["chat"] + argv_list
    args = p.parse_args(argv_list)
    if args.cmd == "models":
        return handle_models(args)
    return handle_chat(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
