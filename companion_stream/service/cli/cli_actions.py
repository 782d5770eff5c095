"""CLI action handlers.

Purpose
-------
Subcommand handlers for companion-cli, keeping the entrypoint minimal. This
module has no top-level side effects and is safe to import in tests; the
companion factory, input function and output streams are injectable.

Error Semantics
---------------
- Invalid configuration: JSON error on stderr, exit code ``2``.
- Failed turn: any partial reply is printed labelled ``[incomplete]`` and
  the classified error is printed as JSON on stderr; one-shot mode exits
  with ``1``, interactive mode keeps going.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import signal
import sys
import threading
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any, Callable, Dict, Iterator, Optional, TextIO

from ...base.cancellation import CancellationToken
from ...base.errors import ConfigError, StreamError
from ...base.factory import create_companion
from ...base.interfaces import Companion
from ...base.logging import LogContext, configure_logger, get_logger, normalized_log_event
from ...base.streaming import StreamOutcome
from ...config import CompanionConfig, load_config
from .terminal import TerminalRenderer, WaitingIndicator

QUIT_COMMANDS = {"/quit", "/exit"}
RESET_COMMAND = "/reset"


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed flags into ``load_config`` overrides."""
    terminal: Dict[str, Any] = {}
    if args.quiet:
        terminal["output"] = False
    if args.debug:
        terminal["debug"] = True
    if args.trace:
        terminal["trace"] = True
    overrides: Dict[str, Any] = {"model": args.model}
    if terminal:
        overrides["terminal"] = terminal
    return overrides


def _configure_logging(args: argparse.Namespace) -> None:
    if args.debug or getattr(args, "trace", False):
        configure_logger(level=logging.DEBUG)
    else:
        # Keep stream events off the chat transcript unless asked for.
        configure_logger(level=os.getenv("COMPANION_LOG_LEVEL") or "ERROR")


@contextmanager
def _interrupt_cancels(token: CancellationToken) -> Iterator[None]:
    """Route Ctrl-C to ``token`` for the duration of one turn."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, lambda *_: token.cancel("interrupted by user"))
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def report_outcome(outcome: StreamOutcome, renderer: TerminalRenderer, *, out: TextIO, err: TextIO) -> int:
    """Print what the user should see after a turn; return an exit code."""
    if outcome.ok:
        assert outcome.message is not None  # nosec B101
        if not renderer.enabled:
            print(outcome.message.content, file=out)
        return 0
    error = outcome.error
    assert error is not None  # nosec B101
    if outcome.partial_text:
        print(f"[incomplete] {outcome.partial_text}", file=out)
    payload = {"error": error.message, "code": error.code.value}
    if error.status_code is not None:
        payload["status"] = error.status_code
    print(json.dumps(payload), file=err)
    return 1


def run_turn(
    companion: Companion,
    prompt: str,
    config: CompanionConfig,
    *,
    generate: bool = False,
    use_color: bool = True,
    out: TextIO,
    err: TextIO,
) -> int:
    """Stream one reply to ``out`` and report its outcome."""
    renderer = TerminalRenderer(config.terminal, out, use_color=use_color)
    indicator = WaitingIndicator(config.terminal, out, use_color=use_color)
    token = CancellationToken()
    send = companion.generate if generate else companion.chat
    with _interrupt_cancels(token):
        outcome = send(prompt, renderer, indicator=indicator, token=token)
    renderer.end()
    normalized_log_event(
        get_logger("cli"),
        "cli.turn",
        LogContext(backend=config.backend, model=config.model).bind(generate=generate),
        phase="turn",
        emitted=outcome.metrics.emitted,
        tokens=outcome.metrics.tokens,
        error_code=outcome.error.code.value if outcome.error is not None else None,
        level=logging.DEBUG,
    )
    return report_outcome(outcome, renderer, out=out, err=err)


def interactive_loop(
    companion: Companion,
    config: CompanionConfig,
    *,
    generate: bool = False,
    use_color: bool = True,
    input_fn: Callable[[str], str] = input,
    out: TextIO,
    err: TextIO,
) -> int:
    """Read prompts until ``/quit`` or end of input."""
    while True:
        try:
            line = input_fn("> ")
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            return 0
        prompt = line.strip()
        if not prompt:
            continue
        if prompt in QUIT_COMMANDS:
            return 0
        if prompt == RESET_COMMAND:
            companion.reset()
            print("conversation cleared", file=out)
            continue
        if len(prompt) > config.max_input_length:
            print(f"input too long ({len(prompt)} > {config.max_input_length} characters)", file=err)
            continue
        run_turn(companion, prompt, config, generate=generate, use_color=use_color, out=out, err=err)


def handle_chat(
    args: argparse.Namespace,
    *,
    factory: Callable[..., Companion] = create_companion,
    input_fn: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Execute the ``chat`` subcommand.

    Returns
    -------
    int
        ``0`` on success, ``1`` when a one-shot turn failed, ``2`` on
        configuration errors.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    _configure_logging(args)
    try:
        config = load_config(args.backend, path=args.config, **build_overrides(args))
    except ConfigError as exc:
        print(json.dumps({"error": str(exc)}), file=err)
        return 2
    companion = factory(config)
    use_color = not args.no_color
    if args.prompt is not None:
        return run_turn(companion, args.prompt, config, generate=args.generate, use_color=use_color, out=out, err=err)
    return interactive_loop(
        companion, config, generate=args.generate, use_color=use_color, input_fn=input_fn, out=out, err=err
    )


def handle_models(
    args: argparse.Namespace,
    *,
    factory: Callable[..., Companion] = create_companion,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Execute the ``models`` subcommand: print one model per line.

    Returns
    -------
    int
        ``0`` on success, ``1`` when the listing failed, ``2`` on
        configuration errors.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    _configure_logging(args)
    try:
        config = load_config(args.backend, path=args.config)
    except ConfigError as exc:
        print(json.dumps({"error": str(exc)}), file=err)
        return 2
    try:
        models = factory(config).list_models()
    except StreamError as exc:
        payload: Dict[str, Any] = {"error": exc.message, "code": exc.code.value}
        if exc.status_code is not None:
            payload["status"] = exc.status_code
        print(json.dumps(payload), file=err)
        return 1
    if args.json:
        print(json.dumps([asdict(m) for m in models]), file=out)
    else:
        for model in models:
            print(model.describe(), file=out)
    return 0

__all__ = [
    "build_overrides",
    "handle_chat",
    "handle_models",
    "interactive_loop",
    "report_outcome",
    "run_turn",
]
