"""
Error taxonomy for the picker.

Each failure class terminates only the phase it occurred in and maps to a
distinct process exit code.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes, one per terminal outcome."""

    CONFIRMED = 0
    """A selection was confirmed and handed to the output boundary."""

    CANCELLED = 1
    """The user pressed Escape, or there was nothing to pick."""

    CONFIGURATION_ERROR = 2
    """Invalid configuration, detected before the interactive loop starts."""

    CAPTURE_ERROR = 3
    """The captured text could not be acquired."""

    DELIVERY_ERROR = 4
    """The selected text could not be delivered to its destination."""


class HintpickError(Exception):
    """Base class for all picker errors."""

    exit_code: ExitCode = ExitCode.CONFIGURATION_ERROR


class ConfigurationError(HintpickError):
    """Invalid regex, colour, alphabet or pattern name, or contradictory flags."""

    exit_code = ExitCode.CONFIGURATION_ERROR


class CaptureError(HintpickError):
    """The text-acquisition collaborator failed."""

    exit_code = ExitCode.CAPTURE_ERROR


class InteractionCancelled(HintpickError):
    """Not a failure: the interaction ended without a selection."""

    exit_code = ExitCode.CANCELLED


class OutputDeliveryError(HintpickError):
    """The output sink (tmux buffer, clipboard, file) failed."""

    exit_code = ExitCode.DELIVERY_ERROR
