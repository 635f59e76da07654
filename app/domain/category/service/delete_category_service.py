# -*- coding: utf-8 -*-
"""
카테고리 삭제 서비스
"""
from typing import Callable, Sequence

import structlog

from app.domain.category.errors import PublishError
from app.domain.category.model.category import DeletionEvent, DeletionOutcome, DeletionStatus
from app.infrastructure.messaging.event_publisher import EventPublisher, PublishResult
from app.infrastructure.storage.partition_store import PartitionStore

logger = structlog.get_logger()


def _call_now(func: Callable, *args) -> None:
    func(*args)


class CategoryDeletionService:
    """
    카테고리 삭제 오케스트레이터
    - 모든 파티션 삭제 성공 시에만 CategoryDeleted 이벤트 발행
    - 발행은 dispatch 로 넘겨서 응답 경로와 분리 (라우터는 BackgroundTasks 사용)
    - 재시도 없음, 실패 후 복구는 호출자가 같은 이름으로 다시 요청하는 것뿐
    """

    def __init__(self, store: PartitionStore, publisher: EventPublisher, partitions: Sequence[str]):
        if not partitions:
            raise ValueError("At least one partition is required")
        self.store = store
        self.publisher = publisher
        self.partitions = tuple(partitions)

    def delete_category(self, name: str, dispatch: Callable = _call_now) -> DeletionOutcome:
        log = logger.bind(category=name)
        log.debug("category_delete_received", partitions=list(self.partitions))

        outcome = self.store.delete_across_partitions(name, self.partitions)

        if outcome.status is DeletionStatus.FAILED:
            # 롤백 없음: 이미 지운 파티션은 그대로 남는다
            log.error(
                "category_delete_failed",
                failed_partition=outcome.failed_partition,
                deleted_partitions=list(outcome.deleted_partitions),
                skipped_partitions=list(outcome.skipped_partitions),
                error=str(outcome.error),
            )
            return outcome

        dispatch(self.publish_event, DeletionEvent.from_outcome(outcome))
        log.info("category_deleted")
        return outcome

    def publish_event(self, event: DeletionEvent) -> PublishResult:
        try:
            result = self.publisher.publish(event)
        except Exception as e:
            logger.exception("event_publish_raised", category=event.name)
            result = PublishResult.dropped(PublishError(repr(e)))

        if not result.published:
            logger.warning("category_deleted_without_event", category=event.name, error=str(result.error))
        return result
