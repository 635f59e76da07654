# -*- coding: utf-8 -*-
"""
카테고리 삭제 도메인 모델
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from app.domain.category.errors import PartitionDeleteError

CATEGORY_DELETED = "CategoryDeleted"


class DeletionStatus(str, Enum):
    COMPLETE = "Complete"
    FAILED = "Failed"


@dataclass(frozen=True)
class PartitionResult:
    partition: str
    succeeded: bool
    error: Optional[PartitionDeleteError] = None


@dataclass(frozen=True)
class DeletionOutcome:
    """
    한 번의 삭제 요청에 대한 파티션별 결과
    - results 는 실제로 시도한 파티션만 담는다 (fail-fast 이후 파티션은 없음)
    """
    name: str
    partitions: Tuple[str, ...]
    results: Tuple[PartitionResult, ...]

    @property
    def status(self) -> DeletionStatus:
        if len(self.results) == len(self.partitions) and all(r.succeeded for r in self.results):
            return DeletionStatus.COMPLETE
        return DeletionStatus.FAILED

    @property
    def deleted_partitions(self) -> Tuple[str, ...]:
        return tuple(r.partition for r in self.results if r.succeeded)

    @property
    def failed_partition(self) -> Optional[str]:
        for r in self.results:
            if not r.succeeded:
                return r.partition
        return None

    @property
    def skipped_partitions(self) -> Tuple[str, ...]:
        return self.partitions[len(self.results):]

    @property
    def error(self) -> Optional[PartitionDeleteError]:
        for r in self.results:
            if r.error is not None:
                return r.error
        return None


@dataclass(frozen=True)
class DeletionEvent:
    name: str
    event_type: str = CATEGORY_DELETED

    @classmethod
    def from_outcome(cls, outcome: DeletionOutcome) -> "DeletionEvent":
        if outcome.status is not DeletionStatus.COMPLETE:
            raise ValueError(f"Category {outcome.name!r} was not fully deleted")
        return cls(name=outcome.name)

    def to_message(self) -> dict:
        return {
            "eventType": self.event_type,
            "data": {"name": self.name},
        }
