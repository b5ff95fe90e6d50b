"""Tests for the tmux command wrappers, using captured command output."""

from __future__ import annotations

import subprocess

import pytest

from hintpick_core.errors import CaptureError, ConfigurationError, OutputDeliveryError
from picker_service import tmux
from picker_service.tmux import CaptureRegion, Pane


class FakeRun:
    """Stands in for `subprocess.run`, recording commands."""

    def __init__(self, stdout: str = "", returncode: int = 0, stderr: str = "") -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.calls: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if self.returncode:
            raise subprocess.CalledProcessError(self.returncode, cmd, output="", stderr=self.stderr)
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr="")


@pytest.fixture
def fake_run(monkeypatch):
    def install(**kwargs) -> FakeRun:
        run = FakeRun(**kwargs)
        monkeypatch.setattr(tmux.subprocess, "run", run)
        return run

    return install


class TestPane:
    """Parsing `list-panes` lines."""

    def test_parse(self):
        assert Pane.from_format_line("%52:false:62:3:false") == Pane("%52", False, 62, 3, False)

    def test_empty_scroll_position(self):
        assert Pane.from_format_line("%53:true:23::true") == Pane("%53", True, 23, 0, True)

    @pytest.mark.parametrize("line", ["52:false:62:3:false", "%52:false:62", "%52:false:x:3:false"])
    def test_invalid(self, line):
        with pytest.raises(CaptureError):
            Pane.from_format_line(line)

    def test_list_panes_and_active(self, fake_run):
        run = fake_run(stdout="%1:false:40::false\n%2:false:40::true\n")
        panes = tmux.list_panes()
        assert [p.id for p in panes] == ["%1", "%2"]
        assert tmux.active_pane(panes).id == "%2"
        assert run.calls[0][:3] == ["tmux", "list-panes", "-F"]

    def test_no_active_pane(self):
        with pytest.raises(CaptureError):
            tmux.active_pane([Pane("%1", False, 10, 0, False)])


class TestOptions:
    """Reading `@hintpick-*` options."""

    def test_parse_options(self):
        output = '@hintpick-alphabet "qwerty"\n@hintpick-reverse true\nstatus on\n@other-opt x\n'
        assert tmux.parse_options(output, "@hintpick-") == {"alphabet": "qwerty", "reverse": "true"}

    def test_value_with_spaces(self):
        output = "@hintpick-custom-pattern 'id (\\d+)'\n"
        assert tmux.parse_options(output, "@hintpick-") == {"custom-pattern": "id (\\d+)"}

    def test_get_options_failure_is_configuration_error(self, fake_run):
        fake_run(returncode=1, stderr="no server running")
        with pytest.raises(ConfigurationError, match="no server running"):
            tmux.get_options("@hintpick-")


class TestCapture:
    """`capture-pane` arguments."""

    def test_visible_area_follows_scroll(self):
        pane = Pane("%52", True, 62, 3, True)
        assert tmux.capture_args(pane, CaptureRegion.VISIBLE_AREA) == [
            "capture-pane", "-t", "%52", "-J", "-p", "-S", "-3", "-E", "58",
        ]

    def test_visible_area_unscrolled(self):
        pane = Pane("%1", False, 24, 0, True)
        assert tmux.capture_args(pane, CaptureRegion.VISIBLE_AREA)[-4:] == ["-S", "0", "-E", "23"]

    def test_entire_history(self):
        pane = Pane("%1", False, 24, 0, True)
        assert tmux.capture_args(pane, CaptureRegion.ENTIRE_HISTORY)[-4:] == ["-S", "-", "-E", "-"]

    def test_region_parse(self):
        assert CaptureRegion.parse("Entire-History") is CaptureRegion.ENTIRE_HISTORY
        with pytest.raises(ConfigurationError):
            CaptureRegion.parse("leading")

    def test_capture_failure(self, fake_run):
        fake_run(returncode=1, stderr="can't find pane")
        with pytest.raises(CaptureError, match="can't find pane"):
            tmux.capture_pane(Pane("%9", False, 10, 0, True), CaptureRegion.VISIBLE_AREA)


class TestCommands:
    """Commands acting on tmux."""

    def test_set_buffer(self, fake_run):
        run = fake_run()
        tmux.set_buffer("-text")
        assert run.calls == [["tmux", "set-buffer", "--", "-text"]]

    def test_set_buffer_failure_is_delivery_error(self, fake_run):
        fake_run(returncode=1)
        with pytest.raises(OutputDeliveryError):
            tmux.set_buffer("x")

    def test_send_keys_literal(self, fake_run):
        run = fake_run()
        tmux.send_keys("%3", "Enter")
        assert run.calls == [["tmux", "send-keys", "-t", "%3", "-l", "--", "Enter"]]

    def test_swap_pane(self, fake_run):
        run = fake_run()
        tmux.swap_pane_with("[hintpick].0")
        assert run.calls == [["tmux", "swap-pane", "-Z", "-s", "[hintpick].0"]]

    def test_missing_tmux(self, monkeypatch):
        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(tmux.subprocess, "run", missing)
        with pytest.raises(CaptureError, match="not found"):
            tmux.list_panes()
