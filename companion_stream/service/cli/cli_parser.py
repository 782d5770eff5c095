"""CLI parser construction for companion-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...config.defaults import CLI_DEFAULT_BACKEND, SUPPORTED_BACKENDS


def _str2bool(v: str | None) -> bool:
    """Best-effort conversion of common truthy/falsey strings to bool.

    ``None`` (flag given without a value) is treated as ``True``.
    """
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with the ``chat`` and ``models`` subcommands.

    This function performs no side effects and wires only argument shapes.
    """
    p = argparse.ArgumentParser(prog="companion-cli", description="Stream chat replies from a language model")
    sub = p.add_subparsers(dest="cmd")

    p_chat = sub.add_parser("chat", help="Chat with a backend (interactive unless --prompt is given)")
    p_chat.add_argument("--backend", default=CLI_DEFAULT_BACKEND, choices=SUPPORTED_BACKENDS)
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--prompt", default=None, help="Send one prompt and exit")
    p_chat.add_argument("--config", default=None, help="Path to a JSON or YAML config file")
    p_chat.add_argument("--generate", action="store_true", help="Use the single-shot generate endpoint")
    p_chat.add_argument("--no-color", action="store_true")
    p_chat.add_argument("--quiet", action="store_true", help="Print only the finished reply, no spinner")
    p_chat.add_argument("--debug", nargs="?", const=True, type=_str2bool, default=False)
    p_chat.add_argument("--trace", action="store_true", help="Log every decoded frame")

    p_models = sub.add_parser("models", help="List the models a backend can serve")
    p_models.add_argument("--backend", default=CLI_DEFAULT_BACKEND, choices=SUPPORTED_BACKENDS)
    p_models.add_argument("--config", default=None, help="Path to a JSON or YAML config file")
    p_models.add_argument("--json", action="store_true", help="Print the listing as a JSON array")
    p_models.add_argument("--debug", nargs="?", const=True, type=_str2bool, default=False)
    return p


__all__ = ["build_parser", "_str2bool"]
