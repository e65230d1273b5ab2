"""Failure taxonomy for store transitions."""
import errno
from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERMISSION_OR_IO = "permission_or_io"
    UNRESOLVABLE = "unresolvable"


@dataclass(frozen=True)
class OperationFailure:
    """One failed item, reported to the user through a messagebox."""

    kind: ErrorKind
    path: str
    message: str

    def describe(self):
        return f'{self.message}: {self.path}' if self.path else self.message


class ReentrantDispatchError(RuntimeError):
    """Raised when an action is dispatched while another one is being applied."""


def failure_from_os_error(exc, path, verb):
    """Map an OSError raised by the filesystem port to an OperationFailure."""
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        kind = ErrorKind.NOT_FOUND
    elif isinstance(exc, FileExistsError):
        kind = ErrorKind.CONFLICT
    else:
        kind = ErrorKind.PERMISSION_OR_IO
    reason = exc.strerror or str(exc)
    return OperationFailure(kind, path, f"Can't {verb} ({reason})")
