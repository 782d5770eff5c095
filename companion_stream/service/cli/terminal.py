"""Terminal presentation for the CLI.

Everything here takes an explicit :class:`TerminalConfig` and output stream;
there is no module-level terminal state, so the decoder and backends stay
testable without a terminal.

- :class:`WaitingIndicator` spins a small prompt on a daemon thread while the
  request is in flight. It is stopped through a :class:`CancellationToken`
  the moment response headers arrive and clears its line.
- :class:`TerminalRenderer` is a delta callback printing each fragment in the
  configured colour as it arrives.
"""
from __future__ import annotations

import sys
import threading
from typing import Optional, TextIO

from ...base.cancellation import CancellationToken
from ...base.models import Message
from ...config import TerminalConfig
from ...config.defaults import SPINNER_FRAMES, SPINNER_INTERVAL_SECONDS, SPINNER_PROMPT, TERM_COLORS

RESET = "\033[0m"
CLEAR_LINE = "\x1b[2K\r"
PROMPT_COLOR = TERM_COLORS["yellow"]


class WaitingIndicator:
    """Spinner shown while waiting for response headers.

    ``start`` and ``stop`` may be called once per turn; ``stop`` is
    idempotent and returns only after the spinner thread has exited, so the
    first streamed delta never interleaves with a spinner frame.
    """

    def __init__(
        self,
        config: TerminalConfig,
        stream: Optional[TextIO] = None,
        *,
        interval: float = SPINNER_INTERVAL_SECONDS,
        frames: str = SPINNER_FRAMES,
        use_color: bool = True,
    ) -> None:
        self._enabled = config.output
        self._color = PROMPT_COLOR if use_color else ""
        self._reset = RESET if use_color else ""
        self._stream = stream or sys.stdout
        self._interval = interval
        self._frames = frames
        self._token: Optional[CancellationToken] = None
        self._thread: Optional[threading.Thread] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if not self._enabled or self.running:
            return
        self._token = CancellationToken()
        self._thread = threading.Thread(target=self._spin, args=(self._token,), name="waiting-indicator", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        token, thread = self._token, self._thread
        if token is None or thread is None:
            return
        token.cancel("response headers received")
        thread.join()
        self._token = None
        self._thread = None
        self._stream.write(CLEAR_LINE)
        self._stream.flush()

    def _spin(self, token: CancellationToken) -> None:
        index = 0
        while not token.cancelled:
            ch = self._frames[index % len(self._frames)]
            self._stream.write(f"\r{self._color}{SPINNER_PROMPT}{self._reset} {ch}")
            self._stream.flush()
            self.ticks += 1
            index += 1
            if token.wait(self._interval):
                break


class TerminalRenderer:
    """Delta callback that prints each fragment as it arrives.

    Returns ``None`` for every delta (never rejects one). With
    ``config.output`` disabled it prints nothing and the caller shows the
    finished message instead.
    """

    def __init__(self, config: TerminalConfig, stream: Optional[TextIO] = None, *, use_color: bool = True) -> None:
        self._config = config
        self._stream = stream or sys.stdout
        self._color = config.ansi if use_color else ""
        self._reset = RESET if use_color else ""
        self._started = False

    @property
    def enabled(self) -> bool:
        return self._config.output

    def __call__(self, message: Message) -> None:
        if not self._config.output:
            return None
        if not self._started:
            self._stream.write(self._color)
            self._started = True
        self._stream.write(message.content)
        self._stream.flush()
        return None

    def end(self) -> None:
        """Close the current reply: reset colour and end the line."""
        if self._started:
            self._stream.write(self._reset + "\n")
            self._stream.flush()
        self._started = False


__all__ = ["WaitingIndicator", "TerminalRenderer", "RESET", "CLEAR_LINE"]
