"""
Immutable point-in-time view of all container records.
"""
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from .container_record import ContainerRecord


@dataclass(frozen=True)
class Snapshot:
    """
    Records keyed by container key, plus the time they were captured.

    ``captured_at`` is a monotonic clock reading used for staleness checks;
    ``captured_wall`` is the matching wall-clock time, for display only.
    """
    records: Mapping[str, ContainerRecord]
    captured_at: float
    captured_wall: datetime

    @classmethod
    def build(cls,
              records: Dict[str, ContainerRecord],
              captured_at: float,
              captured_wall: datetime) -> "Snapshot":
        """
        Creates a snapshot holding a read-only copy of ``records``.
        """
        return cls(
            records=MappingProxyType(dict(records)),
            captured_at=captured_at,
            captured_wall=captured_wall,
        )

    def get(self, key: str) -> Optional[ContainerRecord]:
        return self.records.get(key)

    def __iter__(self) -> Iterator[ContainerRecord]:
        return iter(self.records.values())

    def __len__(self) -> int:
        return len(self.records)
