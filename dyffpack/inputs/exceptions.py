"""Input subsystem exceptions."""

from dyffpack.core.exceptions import DyffError


class InputError(DyffError):
    """Input could not be read or parsed."""


class ChangeRootError(InputError):
    """Document root could not be moved to the requested path."""
