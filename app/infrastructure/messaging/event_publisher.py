# app/infrastructure/messaging/event_publisher.py
import json
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pika
import structlog
from pika.exceptions import AMQPError

from app.domain.category.errors import PublishError
from app.domain.category.model.category import DeletionEvent

logger = structlog.get_logger()


class PublishStatus(str, Enum):
    PUBLISHED = "Published"
    DROPPED = "Dropped"


@dataclass(frozen=True)
class PublishResult:
    status: PublishStatus
    error: Optional[PublishError] = None

    @property
    def published(self) -> bool:
        return self.status is PublishStatus.PUBLISHED

    @classmethod
    def dropped(cls, error: PublishError) -> "PublishResult":
        return cls(status=PublishStatus.DROPPED, error=error)


PUBLISHED = PublishResult(status=PublishStatus.PUBLISHED)


class EventPublisher(ABC):
    """
    삭제 이벤트 발행 전략
    - 기본 구현은 best-effort (재시도/outbox 없음)
    - publish 는 예외를 던지지 않고 PublishResult 로 결과를 돌려준다
    """

    def connect(self) -> bool:
        return True

    @abstractmethod
    def publish(self, event: DeletionEvent) -> PublishResult:
        ...

    def close(self) -> None:
        pass


class RabbitMQPublisher(EventPublisher):
    """
    RabbitMQ best-effort 발행기
    - BlockingConnection 은 스레드 안전하지 않으므로 전용 스레드 하나에서만 사용
    - heartbeat 는 끄고, 연결이 끊긴 상태로 publish 가 들어오면 한 번만 재연결
    """

    def __init__(
        self,
        url: str,
        queue: str,
        timeout: float = 5.0,
        connection_factory=pika.BlockingConnection,
    ):
        self.url = url
        self.queue = queue
        self.timeout = timeout
        self._connection_factory = connection_factory
        self._connection = None
        self._channel = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="rabbitmq-publisher")

    @property
    def connected(self) -> bool:
        return self._channel is not None and self._channel.is_open

    def _parameters(self) -> pika.URLParameters:
        params = pika.URLParameters(self.url)
        params.socket_timeout = self.timeout
        params.blocked_connection_timeout = self.timeout
        params.connection_attempts = 1
        # 요청 사이에 I/O 를 돌려줄 곳이 없으므로 heartbeat 를 쓰지 않음
        params.heartbeat = 0
        return params

    def _open(self) -> bool:
        try:
            connection = self._connection_factory(self._parameters())
            channel = connection.channel()
            channel.queue_declare(queue=self.queue, durable=True)
        except (AMQPError, OSError) as e:
            logger.error("broker_connect_failed", queue=self.queue, error=repr(e))
            return False

        self._connection = connection
        self._channel = channel
        logger.info("broker_connected", queue=self.queue)
        return True

    def _discard(self) -> None:
        connection, self._connection, self._channel = self._connection, None, None
        if connection is None or not connection.is_open:
            return
        try:
            connection.close()
        except (AMQPError, OSError) as e:
            logger.warning("broker_close_failed", queue=self.queue, error=repr(e))

    def _publish(self, message: dict) -> PublishResult:
        if not self.connected:
            self._discard()
            if not self._open():
                error = PublishError("Channel is not initialized")
                logger.error("event_dropped", queue=self.queue, payload=message, error=str(error))
                return PublishResult.dropped(error)

        try:
            self._channel.basic_publish(
                exchange="",
                routing_key=self.queue,
                body=json.dumps(message),
                properties=pika.BasicProperties(
                    content_type="application/json",
                    delivery_mode=2,  # persistent
                ),
            )
        except (AMQPError, OSError) as e:
            # 다음 publish 에서 새 연결을 연다 (이번 메시지는 재전송하지 않음)
            self._discard()
            error = PublishError(f"Error publishing event: {e!r}")
            logger.error("event_dropped", queue=self.queue, payload=message, error=str(error))
            return PublishResult.dropped(error)

        logger.info("event_published", queue=self.queue, payload=message)
        return PUBLISHED

    def connect(self) -> bool:
        """
        브로커 연결 + durable 큐 선언
        실패해도 서비스는 계속 동작 (publish 시 재연결 시도, 실패하면 Dropped)
        """
        return self._executor.submit(self._open).result()

    def publish(self, event: DeletionEvent) -> PublishResult:
        message = event.to_message()
        try:
            future = self._executor.submit(self._publish, message)
        except RuntimeError:
            # close() 이후
            error = PublishError("Publisher is closed")
            logger.error("event_dropped", queue=self.queue, payload=message, error=str(error))
            return PublishResult.dropped(error)
        return future.result()

    def close(self) -> None:
        try:
            self._executor.submit(self._discard).result()
        except RuntimeError:
            return
        self._executor.shutdown(wait=True)
