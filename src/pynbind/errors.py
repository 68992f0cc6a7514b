"""
Errors reported by the artifact locator and the binding initializer.

All three failures are terminal. Nothing here is retried internally;
a caller that wants a retry (e.g. with another root directory) does it
itself.
"""

from pathlib import Path
from typing import List, Optional, Sequence


class BindingError(RuntimeError):
    """Base class for every failure reported by pynbind."""


class ExhaustedSearch(BindingError):
    """No candidate path resolved to a loadable artifact.

    Attributes:
        tries: Every attempted path, in the order it was tried.
    """

    def __init__(self, tries: Sequence[Path]):
        self.tries: List[Path] = list(tries)
        super().__init__(
            'Could not locate the bindings file. Tried:\n'
            + '\n'.join(str(path) for path in self.tries)
        )


class LoadFailure(BindingError):
    """The artifact was found but loading it produced no usable module."""

    def __init__(self, path: Path, reason: Optional[str] = None):
        self.path = path
        message = f'Error loading addon: {path}'
        if reason:
            message += f' ({reason})'
        super().__init__(message)


class BootstrapFailure(BindingError):
    """The bundle loaded, but its bootstrap entry point raised."""

    def __init__(self, path: Path, entry_point: str):
        self.path = path
        self.entry_point = entry_point
        super().__init__(f'Bootstrap entry point {entry_point!r} failed for {path}')
