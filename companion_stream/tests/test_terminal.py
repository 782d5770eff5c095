"""Terminal renderer and waiting indicator tests."""
from __future__ import annotations

import io
import time

from companion_stream.base.models import Message
from companion_stream.config import TerminalConfig
from companion_stream.service.cli.terminal import CLEAR_LINE, RESET, TerminalRenderer, WaitingIndicator


def _delta(text: str) -> Message:
    return Message(role="assistant", content=text)


def test_renderer_writes_colour_once_and_resets_at_end():
    out = io.StringIO()
    renderer = TerminalRenderer(TerminalConfig(color="cyan"), out)
    assert renderer(_delta("Hi")) is None  # nosec B101
    renderer(_delta(" there"))
    renderer.end()
    assert out.getvalue() == "\033[36mHi there" + RESET + "\n"  # nosec B101


def test_renderer_without_colour():
    out = io.StringIO()
    renderer = TerminalRenderer(TerminalConfig(), out, use_color=False)
    renderer(_delta("plain"))
    renderer.end()
    renderer.end()
    assert out.getvalue() == "plain\n"  # nosec B101


def test_renderer_silent_when_output_disabled():
    out = io.StringIO()
    renderer = TerminalRenderer(TerminalConfig(output=False), out)
    renderer(_delta("hidden"))
    renderer.end()
    assert not renderer.enabled and out.getvalue() == ""  # nosec B101


def test_indicator_spins_until_stopped_then_clears_line():
    out = io.StringIO()
    indicator = WaitingIndicator(TerminalConfig(), out, interval=0.001)
    indicator.start()
    while indicator.ticks < 3:
        time.sleep(0.001)
    indicator.stop()
    text = out.getvalue()
    assert not indicator.running and text.endswith(CLEAR_LINE)  # nosec B101
    assert "*AI is thinking*>" in text and " ~" in text and " !" in text  # nosec B101
    ticks = indicator.ticks
    indicator.stop()
    assert indicator.ticks == ticks and out.getvalue() == text  # nosec B101


def test_indicator_disabled_when_output_is_off():
    out = io.StringIO()
    indicator = WaitingIndicator(TerminalConfig(output=False), out)
    indicator.start()
    assert not indicator.running  # nosec B101
    indicator.stop()
    assert out.getvalue() == "" and indicator.ticks == 0  # nosec B101


def test_stop_without_start_is_a_no_op():
    out = io.StringIO()
    WaitingIndicator(TerminalConfig(), out).stop()
    assert out.getvalue() == ""  # nosec B101


def test_indicator_without_color_writes_plain_prompt():
    out = io.StringIO()
    indicator = WaitingIndicator(TerminalConfig(), out, interval=0.001, use_color=False)
    indicator.start()
    while indicator.ticks < 1:
        time.sleep(0.001)
    indicator.stop()
    text = out.getvalue()
    assert text.startswith("\r*AI is thinking*> ")  # nosec B101
    assert "\033[" not in text.replace(CLEAR_LINE, "")  # nosec B101
