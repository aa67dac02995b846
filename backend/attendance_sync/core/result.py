from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from attendance_sync.core.errors import AttendanceSyncError

T = TypeVar("T")
E = TypeVar("E", bound=AttendanceSyncError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        """Raise the carried error."""
        raise self.error


Result = Union[Ok[T], Err[E]]
