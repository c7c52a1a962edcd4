#!/usr/bin/env python3
"""
Tests for the command-line entry point.
"""

import io
from unittest.mock import patch

from writing_gpt import main as cli
from writing_gpt.answer_service import AnswerService, AnswerServiceConfig
from writing_gpt.llm.events import AnswerEvent, DoneEvent, ErrorEvent


class FixedProvider:
    def __init__(self, events):
        self.events = events

    async def generate_answer(self, prompt, on_event, cancel_event=None):
        for event in self.events:
            on_event(event)


def service_with(events):
    config = AnswerServiceConfig(separator="--", templates={"rewrite": "Rewrite:"})
    return AnswerService(FixedProvider(events), config)


def run_cli(argv, events):
    with patch.object(cli.Configuration, "load_env"), patch.object(
        cli.AnswerService, "from_configuration", return_value=service_with(events)
    ):
        return cli.main(argv)


def test_parse_args():
    args = cli.parse_args(["rewrite", "some text", "--config", "/tmp/c.yaml"])
    assert args.action == "rewrite"
    assert args.text == "some text"
    assert args.config_path == "/tmp/c.yaml"


def test_prints_answer_incrementally(capsys):
    events = [
        AnswerEvent(text="Hello"),
        AnswerEvent(text="Hello world"),
        DoneEvent(),
    ]
    assert run_cli(["rewrite", "hello wrld"], events) == 0
    assert capsys.readouterr().out == "Hello world\n"


def test_error_event_sets_exit_code(capsys):
    assert run_cli(["rewrite", "text"], [ErrorEvent(reason="Streaming API error 401")]) == 1
    assert "Streaming API error 401" in capsys.readouterr().err


def test_unknown_action(capsys):
    assert run_cli(["translate", "text"], [DoneEvent()]) == 2
    assert "Unknown action" in capsys.readouterr().err


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("from stdin"))
    assert run_cli(["rewrite"], [AnswerEvent(text="ok"), DoneEvent()]) == 0
    assert capsys.readouterr().out == "ok\n"
