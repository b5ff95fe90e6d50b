"""
Command-line interface for hintpick.

Usage:
    some-command | hintpick pick                  # Pick from piped text, print the result
    hintpick --alphabet qwerty -x url pick        # Picker options go before the command
    hintpick tmux                                 # Pick from the active tmux pane
    hintpick patterns                             # List named patterns
    hintpick alphabets                            # List alphabet presets
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from hintpick_core.alphabets import ALPHABETS, parse_alphabet
from hintpick_core.config import CommandBindings, HintAlignment, HintStyle, UiColors
from hintpick_core.errors import ExitCode, HintpickError, InteractionCancelled
from hintpick_core.models import OutputDestination
from hintpick_core.output import to_emission
from hintpick_core.textbuf.model import build_model
from hintpick_core.textbuf.patterns import PATTERN_ALIASES, PATTERNS
from hintpick_core.ui.session import run_session
from picker_service import tmux
from picker_service.capture import normalize_text, read_stdin
from picker_service.delivery import deliver, deliver_tmux
from picker_service.settings import TMUX_OPTION_PREFIX, Settings, get_settings
from picker_service.terminal import TtyTerminal

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="hintpick",
    help="Label pattern matches in captured text and pick one by typing its hint.",
)
console = Console()


def setup_logging(log_file: Path | None, level: str = "DEBUG") -> None:
    """Log to `log_file` if set; otherwise stay silent, the screen belongs to the picker."""
    root = logging.getLogger()
    if log_file is None:
        root.addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper(), logging.DEBUG),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@contextmanager
def _exit_on_error(notify: Callable[[str], None] | None = None) -> Iterator[None]:
    """Report a failure once (stderr, or `notify` as well) and exit with its code."""
    try:
        yield
    except InteractionCancelled as e:
        logger.debug("cancelled: %s", e)
        raise typer.Exit(int(ExitCode.CANCELLED)) from None
    except HintpickError as e:
        logger.error("%s: %s", type(e).__name__, e)
        typer.echo(f"hintpick: {e}", err=True)
        if notify is not None:
            try:
                notify(f"hintpick: {e}")
            except HintpickError as notify_error:
                logger.warning("could not report error: %s", notify_error)
        raise typer.Exit(int(e.exit_code)) from None


def _parse_colors(values: list[str] | None) -> dict[str, str]:
    colors: dict[str, str] = {}
    for value in values or ():
        role, sep, name = value.partition("=")
        role = role.strip().replace("-", "_")
        if not sep or role not in UiColors.model_fields:
            allowed = ", ".join(UiColors.model_fields)
            raise typer.BadParameter(f"Expected ROLE=COLOR with ROLE one of {allowed}, got {value!r}")
        colors[role] = name.strip()
    return colors


def _load_settings(ctx: typer.Context, *, tmux_options: dict[str, str] | None = None, **service: Any) -> Settings:
    settings = get_settings()
    if tmux_options:
        settings = settings.merged_tmux_options(tmux_options)
    settings = settings.merged({**ctx.obj["service"], **service})
    setup_logging(settings.log_file, settings.log_level)
    return settings


@app.callback()
def main(
    ctx: typer.Context,
    named_patterns: list[str] | None = typer.Option(None, "--pattern-name", "-x", help="Named pattern to use (repeatable); see `hintpick patterns`."),
    custom_patterns: list[str] | None = typer.Option(None, "--custom-pattern", "-X", help="Additional regex; its first group is the match (repeatable)."),
    all_patterns: bool | None = typer.Option(None, "--all-patterns/--no-all-patterns", "-A", help="Use every named pattern."),
    alphabet: str | None = typer.Option(None, "--alphabet", "-k", help="Hint alphabet, e.g. qwerty, dvorak-homerow; see `hintpick alphabets`."),
    reverse: bool | None = typer.Option(None, "--reverse/--no-reverse", "-r", help="Assign hints starting from the bottom."),
    unique_hint: bool | None = typer.Option(None, "--unique-hint/--no-unique-hint", "-u", help="Identical texts share one hint."),
    focus_wrap_around: bool | None = typer.Option(None, "--focus-wrap-around/--no-focus-wrap-around", "-w", help="Focus wraps from last to first span."),
    multi_select: bool | None = typer.Option(None, "--multi-select/--no-multi-select", "-m", help="Hints toggle spans; Enter confirms them all."),
    separator: str | None = typer.Option(None, "--separator", help="Joins multi-selected texts."),
    hint_alignment: HintAlignment | None = typer.Option(None, "--hint-alignment", help="Hint position on its span."),
    hint_style: HintStyle | None = typer.Option(None, "--hint-style", "-s", help="Extra hint styling."),
    hint_surroundings: str | None = typer.Option(None, "--hint-surroundings", help="Two chars around hints with --hint-style surround."),
    colors: list[str] | None = typer.Option(None, "--color", help="ROLE=COLOR, e.g. hint_fg=red (repeatable)."),
    output_format: str | None = typer.Option(None, "--output-format", help="Output template: %H is the text, %U the uppercased flag."),
    output_destination: OutputDestination | None = typer.Option(None, "--destination", "-d", help="Initial destination."),
    bindings: CommandBindings | None = typer.Option(None, "--bindings", help="Confirm/destination key scheme."),
    status_line: bool | None = typer.Option(None, "--status-line/--no-status-line", help="Show a status row."),
    clipboard_exe: str | None = typer.Option(None, "--clipboard-exe", help="Command receiving clipboard text on stdin."),
    log_file: Path | None = typer.Option(None, "--log-file", help="Write debug logs to this file."),
) -> None:
    """Pick text by typing hints overlaid on pattern matches."""
    picker: dict[str, Any] = {
        "named_patterns": named_patterns or None,
        "custom_patterns": custom_patterns or None,
        "all_patterns": all_patterns,
        "alphabet": alphabet,
        "reverse": reverse,
        "unique_hint": unique_hint,
        "focus_wrap_around": focus_wrap_around,
        "multi_select": multi_select,
        "separator": separator,
        "hint_alignment": hint_alignment,
        "hint_style": hint_style,
        "hint_surroundings": hint_surroundings,
        "output_format": output_format,
        "output_destination": output_destination,
        "bindings": bindings,
        "status_line": status_line,
        **_parse_colors(colors),
    }
    if named_patterns and all_patterns is None:
        # An explicit pattern list replaces an all-patterns default from the environment.
        picker["all_patterns"] = False
    ctx.obj = {
        "picker": {k: v for k, v in picker.items() if v is not None},
        "service": {k: v for k, v in {"clipboard_exe": clipboard_exe, "log_file": log_file}.items() if v is not None},
    }


@app.command()
def pick(
    ctx: typer.Context,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the buffer destination here instead of stdout."),
    tty_path: str = typer.Option("/dev/tty", "--tty", help="Terminal used for the interface."),
) -> None:
    """
    Pick from text piped on stdin.

    The buffer destination prints to stdout (or --output); the clipboard
    destination pipes to --clipboard-exe.
    """
    with _exit_on_error():
        settings = _load_settings(ctx)
        config = settings.picker_config(**ctx.obj["picker"])
        lines = read_stdin()
        model = build_model(lines, config)
        logger.info("%d lines, %d spans", len(lines), len(model.spans))

        selection = run_session(model, config, TtyTerminal(tty_path))
        deliver(to_emission(selection, config), clipboard_exe=settings.clipboard_exe, output=output)


@app.command("tmux")
def tmux_command(
    ctx: typer.Context,
    ignore_tmux_options: bool = typer.Option(False, "--ignore-tmux-options", "-n", help="Don't read @hintpick-* options from tmux."),
    window_name: str | None = typer.Option(None, "--window-name", "-W", help="Name of the temporary window running the picker."),
    capture_region: str | None = typer.Option(None, "--capture-region", help="visible-area or entire-history."),
) -> None:
    """
    Pick from the active tmux pane.

    Meant to run inside a temporary window named --window-name: its pane is
    swapped with the active one while picking, then swapped back. The buffer
    destination is the tmux paste buffer.
    """
    with _exit_on_error(notify=tmux.display_message):
        options = {} if ignore_tmux_options else tmux.get_options(TMUX_OPTION_PREFIX)
        settings = _load_settings(
            ctx,
            tmux_options=options,
            window_name=window_name,
            capture_region=capture_region,
        )
        config = settings.picker_config(**ctx.obj["picker"])
        region = tmux.CaptureRegion.parse(settings.capture_region)

        pane = tmux.active_pane(tmux.list_panes())
        lines = normalize_text(tmux.capture_pane(pane, region))
        model = build_model(lines, config)
        logger.info("pane %s: %d lines, %d spans", pane.id, len(lines), len(model.spans))
        if not model.spans:
            raise InteractionCancelled("No matches")

        target = f"{settings.window_name}.0"
        tmux.swap_pane_with(target)
        try:
            selection = run_session(model, config, TtyTerminal())
        finally:
            try:
                tmux.swap_pane_with(target)
            except HintpickError as e:
                logger.error("could not swap back %s: %s", target, e)

        deliver_tmux(
            to_emission(selection, config),
            clipboard_exe=settings.clipboard_exe,
            paste_pane_id=pane.id if settings.paste_uppercased else None,
        )


@app.command()
def patterns() -> None:
    """List the named patterns, highest priority first."""
    aliases: dict[str, list[str]] = {}
    for alias, name in PATTERN_ALIASES.items():
        aliases.setdefault(name, []).append(alias)

    table = Table(title="Named patterns")
    table.add_column("Name", style="cyan")
    table.add_column("Aliases")
    table.add_column("Regex", overflow="fold")
    for name, regex in PATTERNS.items():
        table.add_row(name, ", ".join(aliases.get(name, [])), regex)
    console.print(table)


@app.command()
def alphabets() -> None:
    """List the alphabet presets with their usable letters."""
    table = Table(title="Alphabets")
    table.add_column("Name", style="cyan")
    table.add_column("Letters")
    table.add_column("Size", justify="right")
    for name in ALPHABETS:
        alphabet = parse_alphabet(name)
        table.add_row(name, alphabet.letters, str(len(alphabet)))
    console.print(table)


if __name__ == "__main__":
    app()
