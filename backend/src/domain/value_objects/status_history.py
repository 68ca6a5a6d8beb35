"""Append-only log of application status changes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional
from uuid import UUID

from domain.enums import ApplicationStatus
from ._serialization import dump_datetime, load_datetime


@dataclass(frozen=True)
class StatusChange:
    """One entry of the status history."""

    status: ApplicationStatus
    changed_at: datetime
    changed_by: UUID
    reason: Optional[str] = None
    previous_status: Optional[ApplicationStatus] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "changed_at": dump_datetime(self.changed_at),
            "changed_by": str(self.changed_by),
            "reason": self.reason,
            "previous_status": self.previous_status.value if self.previous_status else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StatusChange":
        previous = data.get("previous_status")
        return cls(
            status=ApplicationStatus(data["status"]),
            changed_at=load_datetime(data["changed_at"]),
            changed_by=UUID(str(data["changed_by"])),
            reason=data.get("reason"),
            previous_status=ApplicationStatus(previous) if previous else None,
        )


class StatusHistory:
    """
    Ordered, insert-only log of status changes.

    Entries can be appended and read; existing entries are never replaced
    or removed.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[list[StatusChange]] = None):
        self._entries: list[StatusChange] = list(entries or [])

    def append(self, entry: StatusChange) -> None:
        self._entries.append(entry)

    @property
    def latest(self) -> Optional[StatusChange]:
        return self._entries[-1] if self._entries else None

    def statuses(self) -> list[ApplicationStatus]:
        return [entry.status for entry in self._entries]

    def __iter__(self) -> Iterator[StatusChange]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> StatusChange:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, StatusHistory) and self._entries == other._entries

    def to_list(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, data: Optional[list]) -> "StatusHistory":
        return cls([StatusChange.from_dict(item) for item in (data or [])])

    def __repr__(self) -> str:
        return f"StatusHistory({[e.status.value for e in self._entries]})"
