"""CLI tests: parser shape, entrypoint wiring and chat handler behaviour.

Companions are injected through ``handle_chat(factory=...)``; output goes to
``StringIO`` buffers so assertions never depend on a real terminal.
"""
from __future__ import annotations

import io
import json
from typing import List

import httpx
import pytest

from companion_stream.base.errors import HTTPStatusError, TruncatedStreamError
from companion_stream.base.factory import create_companion
from companion_stream.base.models import Message
from companion_stream.base.streaming import StreamOutcome
from companion_stream.service import cli
from companion_stream.service.cli.cli_actions import build_overrides, handle_chat, handle_models
from companion_stream.service.cli.cli_parser import _str2bool, build_parser
from companion_stream.service.cli.terminal import RESET

from .backends.helpers import Recorder
from .streaming.helpers import chat_frame, ndjson


class FakeCompanion:
    """Replays scripted replies through the delta callback."""

    backend = "ollama"
    model = "llama3.2"

    def __init__(self, config, replies: List[object]):
        self.config = config
        self.replies = list(replies)
        self.prompts: List[str] = []
        self.modes: List[str] = []
        self.resets = 0

    @property
    def conversation(self):
        return []

    def _turn(self, mode, prompt, callback, indicator=None, token=None, **_):
        self.prompts.append(prompt)
        self.modes.append(mode)
        reply = self.replies.pop(0)
        if isinstance(reply, StreamOutcome):
            for piece in reply.partial_text.split("|"):
                if piece:
                    callback(Message(role="assistant", content=piece))
            if reply.ok:
                reply.message.content = reply.partial_text.replace("|", "")
            reply.partial_text = reply.partial_text.replace("|", "")
            return reply
        for piece in reply:
            callback(Message(role="assistant", content=piece))
        return StreamOutcome(message=Message(role="assistant", content="".join(reply)), partial_text="".join(reply))

    def chat(self, prompt, callback=None, **kwargs):
        return self._turn("chat", prompt, callback, **kwargs)

    def generate(self, prompt, callback=None, **kwargs):
        return self._turn("generate", prompt, callback, **kwargs)

    def reset(self):
        self.resets += 1


def _run(argv, replies=(), inputs=()):
    out, err = io.StringIO(), io.StringIO()
    made: List[FakeCompanion] = []

    def factory(config):
        made.append(FakeCompanion(config, list(replies)))
        return made[-1]

    feed = iter(inputs)

    def input_fn(_prompt):
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    args = build_parser().parse_args(["chat", *argv])
    code = handle_chat(args, factory=factory, input_fn=input_fn, out=out, err=err)
    return code, out.getvalue(), err.getvalue(), (made[0] if made else None)


@pytest.mark.parametrize(
    "raw,expected",
    [(None, True), ("yes", True), ("ON", True), ("0", False), ("off", False), ("maybe", True), ("", False)],
)
def test_str2bool(raw, expected):
    assert _str2bool(raw) is expected  # nosec B101


def test_parser_defaults():
    args = build_parser().parse_args(["chat"])
    assert args.backend == "ollama" and args.prompt is None and args.debug is False  # nosec B101
    assert build_parser().parse_args(["chat", "--debug"]).debug is True  # nosec B101


def test_parser_rejects_unknown_backend():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["chat", "--backend", "gopher"])


def test_build_overrides():
    args = build_parser().parse_args(["chat", "--quiet", "--trace", "--model", "phi3"])
    assert build_overrides(args) == {"model": "phi3", "terminal": {"output": False, "trace": True}}  # nosec B101


def test_one_shot_prompt_streams_in_colour():
    code, out, err, companion = _run(["--prompt", "hello"], replies=[["Hi", " there"]])
    assert code == 0 and err == ""  # nosec B101
    assert out == "\033[32mHi there" + RESET + "\n"  # nosec B101
    assert companion.prompts == ["hello"] and companion.modes == ["chat"]  # nosec B101


def test_no_color_and_generate_flags():
    code, out, _, companion = _run(["--prompt", "6*7?", "--no-color", "--generate"], replies=[["42"]])
    assert code == 0 and out == "42\n" and companion.modes == ["generate"]  # nosec B101


def test_quiet_prints_only_the_final_message():
    code, out, _, _ = _run(["--prompt", "hello", "--quiet"], replies=[["Hi", " there"]])
    assert code == 0 and out == "Hi there\n"  # nosec B101


def test_failed_turn_labels_partial_reply_and_reports_json():
    failed = StreamOutcome(error=TruncatedStreamError(message="stream ended without a termination signal"), partial_text="Hi|")
    code, out, err, _ = _run(["--prompt", "hello", "--no-color"], replies=[failed])
    assert code == 1  # nosec B101
    assert out.endswith("[incomplete] Hi\n")  # nosec B101
    assert json.loads(err) == {"error": "stream ended without a termination signal", "code": "truncated"}  # nosec B101


def test_status_error_includes_status():
    failed = StreamOutcome(error=HTTPStatusError(message="unexpected HTTP status 401", status_code=401))
    code, out, err, _ = _run(["--prompt", "hello"], replies=[failed])
    assert code == 1 and out == ""  # nosec B101
    assert json.loads(err)["status"] == 401  # nosec B101


def test_interactive_loop_commands():
    inputs = ["hello", "", "/reset", "x" * 600, "again", "/quit", "never read"]
    code, out, err, companion = _run(["--no-color"], replies=[["one"], ["two"]], inputs=inputs)
    assert code == 0  # nosec B101
    assert companion.prompts == ["hello", "again"] and companion.resets == 1  # nosec B101
    assert out == "one\nconversation cleared\ntwo\n"  # nosec B101
    assert "input too long (600 > 512 characters)" in err  # nosec B101


def test_interactive_loop_ends_on_eof():
    code, out, _, companion = _run(["--no-color"], inputs=[])
    assert code == 0 and out == "\n" and companion.prompts == []  # nosec B101


def test_config_error_exits_with_two():
    code, out, err, companion = _run(["--backend", "openai", "--prompt", "hello"])
    assert code == 2 and out == "" and companion is None  # nosec B101
    assert "api_key is required" in json.loads(err)["error"]  # nosec B101


def test_end_to_end_against_mock_ollama():
    rec = Recorder(ndjson(chat_frame("Hi"), chat_frame(" there", done=True)))
    out, err = io.StringIO(), io.StringIO()
    args = build_parser().parse_args(["chat", "--prompt", "hello", "--no-color", "--model", "mistral"])
    code = handle_chat(
        args,
        factory=lambda config: create_companion(config, transport=httpx.MockTransport(rec)),
        out=out,
        err=err,
    )
    assert code == 0 and out.getvalue().endswith("Hi there\n")  # nosec B101
    assert json.loads(rec.requests[0].content)["model"] == "mistral"  # nosec B101


def test_main_injects_chat_subcommand(monkeypatch):
    seen = []
    monkeypatch.setattr(cli, "handle_chat", lambda args: seen.append(args) or 0)
    assert cli.main(["--prompt", "hi"]) == 0  # nosec B101
    assert cli.main(["chat", "--backend", "openai"]) == 0  # nosec B101
    assert [(a.cmd, a.prompt, a.backend) for a in seen] == [("chat", "hi", "ollama"), ("chat", None, "openai")]  # nosec B101


def test_main_help_exits(capsys):
    with pytest.raises(SystemExit) as info:
        cli.main(["--help"])
    assert info.value.code == 0 and "companion-cli" in capsys.readouterr().out  # nosec B101


def _models(argv, rec):
    out, err = io.StringIO(), io.StringIO()
    args = build_parser().parse_args(["models", *argv])
    code = handle_models(
        args, factory=lambda config: create_companion(config, transport=httpx.MockTransport(rec)), out=out, err=err
    )
    return code, out.getvalue(), err.getvalue()


def test_models_subcommand_prints_one_model_per_line():
    tags = json.dumps({"models": [{"name": "llama3.2:latest"}, {"name": "qwen2:7b", "size": 4_400_000_000}]})
    code, out, err = _models([], Recorder(tags.encode("utf-8")))
    assert code == 0 and err == ""  # nosec B101
    assert out == "llama3.2:latest\nqwen2:7b (4.4 GB)\n"  # nosec B101

    code, out, _ = _models(["--json"], Recorder(tags.encode("utf-8")))
    listed = json.loads(out)
    assert code == 0 and [m["name"] for m in listed] == ["llama3.2:latest", "qwen2:7b"]  # nosec B101
    assert listed[1]["size"] == 4_400_000_000 and listed[0]["owned_by"] is None  # nosec B101


def test_models_subcommand_reports_failure_as_json():
    code, out, err = _models([], Recorder(b"boom", status_code=500))
    assert code == 1 and out == ""  # nosec B101
    assert json.loads(err) == {  # nosec B101
        "error": "unexpected HTTP status 500 listing models",
        "code": "http_status",
        "status": 500,
    }


def test_main_dispatches_models_subcommand(monkeypatch):
    seen = []
    monkeypatch.setattr(cli, "handle_models", lambda args: seen.append(args) or 0)
    assert cli.main(["models", "--backend", "openai", "--json"]) == 0  # nosec B101
    assert [(a.cmd, a.backend, a.json) for a in seen] == [("models", "openai", True)]  # nosec B101
