"""Tests for the hintpick command line, with a scripted terminal in place of /dev/tty."""

from __future__ import annotations

import logging

import pytest
from typer.testing import CliRunner

from hintpick_core.errors import CaptureError
from hintpick_core.ui.keys import KeyName
from picker_service import cli, settings as settings_module, tmux
from picker_service.tmux import Pane

from conftest import FakeTerminal, keys

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Fresh settings from a clean environment, and no real clipboard."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "_settings", None)
    monkeypatch.setenv("HINTPICK_CLIPBOARD_EXE", "hintpick-test-clipboard")
    yield
    logging.getLogger().handlers = [h for h in logging.getLogger().handlers if not isinstance(h, logging.NullHandler)]


@pytest.fixture
def script(monkeypatch):
    """Replace the tty with a terminal replaying the given keys."""

    def install(*items) -> list[FakeTerminal]:
        created: list[FakeTerminal] = []

        def factory(*args, **kwargs):
            terminal = FakeTerminal(keys(*items))
            created.append(terminal)
            return terminal

        monkeypatch.setattr(cli, "TtyTerminal", factory)
        return created

    return install


class TestCatalogCommands:
    """Listing commands."""

    def test_patterns(self):
        result = runner.invoke(cli.app, ["patterns"])
        assert result.exit_code == 0
        assert "markdown-url" in result.output
        assert "ipv4" in result.output

    def test_alphabets(self):
        result = runner.invoke(cli.app, ["alphabets"])
        assert result.exit_code == 0
        assert "dvorak-homerow" in result.output


class TestPick:
    """Picking from stdin."""

    def test_prints_selection(self, script):
        terminals = script("a")
        result = runner.invoke(cli.app, ["-x", "url", "pick"], input="see https://example.com/x now\n")
        assert result.exit_code == 0
        assert result.stdout == "https://example.com/x\n"
        assert terminals[0].exited

    def test_output_format(self, script):
        script("A")
        result = runner.invoke(
            cli.app,
            ["-x", "digits", "--output-format", "%U %H", "pick"],
            input="pid 4242\n",
        )
        assert result.exit_code == 0
        assert result.stdout == "true 4242\n"

    def test_output_file(self, script, tmp_path):
        script(KeyName.ENTER)
        target = tmp_path / "picked.txt"
        result = runner.invoke(cli.app, ["-x", "digits", "pick", "--output", str(target)], input="1234 5678\n")
        assert result.exit_code == 0
        assert target.read_text() == "1234"

    def test_multi_select(self, script):
        script("oa", KeyName.ENTER)
        result = runner.invoke(
            cli.app,
            ["-x", "digits", "--multi-select", "--separator", " ", "pick"],
            input="1111 2222 3333\n",
        )
        assert result.exit_code == 0
        assert result.stdout == "1111 2222\n"

    def test_cancel_exit_code(self, script):
        script(KeyName.ESCAPE)
        result = runner.invoke(cli.app, ["-x", "digits", "pick"], input="1234\n")
        assert result.exit_code == 1
        assert result.stdout == ""

    def test_no_match_exit_code(self, script):
        terminals = script()
        result = runner.invoke(cli.app, ["-x", "url", "pick"], input="no links here\n")
        assert result.exit_code == 1
        assert not any(terminal.entered for terminal in terminals)

    def test_bad_alphabet(self):
        result = runner.invoke(cli.app, ["--alphabet", "klingon", "pick"], input="1234\n")
        assert result.exit_code == 2
        assert "klingon" in result.output

    def test_bad_regex(self):
        result = runner.invoke(cli.app, ["-X", "(", "pick"], input="1234\n")
        assert result.exit_code == 2

    def test_bad_color_option(self):
        result = runner.invoke(cli.app, ["--color", "sparkle=red", "pick"], input="1234\n")
        assert result.exit_code == 2

    def test_bad_enum_is_usage_error(self):
        result = runner.invoke(cli.app, ["--hint-style", "blink", "pick"], input="1234\n")
        assert result.exit_code == 2

    def test_clipboard_failure_exit_code(self, script):
        script(" ", KeyName.ENTER)
        result = runner.invoke(cli.app, ["-x", "digits", "pick"], input="1234\n")
        assert result.exit_code == 4
        assert "hintpick-test-clipboard" in result.output

    def test_log_file(self, script, tmp_path):
        script(KeyName.ESCAPE)
        log_file = tmp_path / "hintpick.log"
        result = runner.invoke(cli.app, ["-x", "digits", "--log-file", str(log_file), "pick"], input="1234\n")
        assert result.exit_code == 1


class TestTmuxCommand:
    """The tmux bridge with tmux itself stubbed out."""

    @pytest.fixture
    def fake_tmux(self, monkeypatch):
        calls: list[tuple] = []
        monkeypatch.setattr(tmux, "get_options", lambda prefix: {"alphabet": "qwerty"})
        monkeypatch.setattr(tmux, "list_panes", lambda: [Pane("%1", False, 10, 0, False), Pane("%2", False, 10, 0, True)])
        monkeypatch.setattr(tmux, "capture_pane", lambda pane, region: "commit a1b2c3d4 done\n")
        monkeypatch.setattr(tmux, "swap_pane_with", lambda target: calls.append(("swap", target)))
        monkeypatch.setattr(tmux, "set_buffer", lambda text: calls.append(("set-buffer", text)))
        monkeypatch.setattr(tmux, "send_keys", lambda pane, text: calls.append(("send-keys", pane, text)))
        monkeypatch.setattr(tmux, "display_message", lambda message: calls.append(("display", message)))
        return calls

    def test_selection_goes_to_tmux_buffer(self, script, fake_tmux):
        script("a")
        result = runner.invoke(cli.app, ["-x", "sha", "tmux"])
        assert result.exit_code == 0
        assert fake_tmux == [
            ("swap", "[hintpick].0"),
            ("swap", "[hintpick].0"),
            ("set-buffer", "a1b2c3d4"),
        ]

    def test_uppercased_selection_pasted(self, script, fake_tmux):
        script("A")
        result = runner.invoke(cli.app, ["-x", "sha", "tmux", "--window-name", "[pick]"])
        assert result.exit_code == 0
        assert fake_tmux == [
            ("swap", "[pick].0"),
            ("swap", "[pick].0"),
            ("send-keys", "%2", "a1b2c3d4"),
            ("set-buffer", "a1b2c3d4"),
        ]

    def test_swapped_back_on_cancel(self, script, fake_tmux):
        script(KeyName.ESCAPE)
        result = runner.invoke(cli.app, ["-x", "sha", "tmux"])
        assert result.exit_code == 1
        assert fake_tmux == [("swap", "[hintpick].0"), ("swap", "[hintpick].0")]

    def test_no_match_skips_swap(self, script, fake_tmux):
        script()
        result = runner.invoke(cli.app, ["-x", "url", "tmux"])
        assert result.exit_code == 1
        assert fake_tmux == []

    def test_bad_capture_region(self, fake_tmux):
        result = runner.invoke(cli.app, ["tmux", "--capture-region", "leading"])
        assert result.exit_code == 2
        assert len(fake_tmux) == 1
        assert fake_tmux[0][0] == "display"
        assert "Unknown capture region 'leading'" in fake_tmux[0][1]

    def test_failed_swap_back_keeps_cancel_exit_code(self, script, fake_tmux, monkeypatch):
        swaps = []

        def swap(target):
            swaps.append(target)
            if len(swaps) == 2:
                raise CaptureError("pane vanished")

        monkeypatch.setattr(tmux, "swap_pane_with", swap)
        script(KeyName.ESCAPE)
        result = runner.invoke(cli.app, ["-x", "sha", "tmux"])
        assert result.exit_code == 1
        assert swaps == ["[hintpick].0", "[hintpick].0"]
