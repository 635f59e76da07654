# app/infrastructure/storage/partition_store.py
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import boto3
import structlog
from botocore.config import Config

from app.domain.category.errors import PartitionDeleteError
from app.domain.category.model.category import DeletionOutcome, PartitionResult
from app.infrastructure.secrets.credential_bootstrapper import Credentials

logger = structlog.get_logger()


class PartitionStore(ABC):
    """카테고리가 비정규화되어 저장된 파티션(테이블) 집합"""

    @abstractmethod
    def delete_item(self, partition: str, name: str) -> None:
        """
        한 파티션에서 키 하나를 삭제한다.
        키가 없어도 성공으로 취급해야 한다 (idempotent).
        """
        ...

    def delete_across_partitions(self, name: str, partitions: Sequence[str]) -> DeletionOutcome:
        """
        파티션 순서대로 하나씩 삭제 (병렬 X)
        - 첫 실패에서 중단, 이후 파티션은 시도하지 않음
        - 예외를 던지지 않고 결과(DeletionOutcome)에 담아 반환
        """
        partitions = tuple(partitions)
        results = []

        for partition in partitions:
            try:
                self.delete_item(partition, name)
            except Exception as e:
                error = PartitionDeleteError(partition, e)
                logger.error("partition_delete_failed", category=name, partition=partition, error=str(e))
                results.append(PartitionResult(partition=partition, succeeded=False, error=error))
                break
            logger.info("partition_deleted", category=name, partition=partition)
            results.append(PartitionResult(partition=partition, succeeded=True))

        return DeletionOutcome(name=name, partitions=partitions, results=tuple(results))


class DynamoPartitionStore(PartitionStore):

    def __init__(self, client, key_attribute: str = "name"):
        self.client = client
        self.key_attribute = key_attribute

    def delete_item(self, partition: str, name: str) -> None:
        # DeleteItem 은 키가 없어도 에러를 내지 않음
        self.client.delete_item(
            TableName=partition,
            Key={self.key_attribute: {"S": name}},
        )


def create_dynamodb_client(
    credentials: Credentials,
    region: str,
    endpoint_url: Optional[str] = None,
    timeout: float = 5.0,
):
    client_kwargs = {
        "service_name": "dynamodb",
        "region_name": region,
        "aws_access_key_id": credentials.access_id,
        "aws_secret_access_key": credentials.access_secret,
        # 자동 재시도 없음, 호출마다 타임아웃
        "config": Config(connect_timeout=timeout, read_timeout=timeout, retries={"max_attempts": 0}),
    }
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url

    client = boto3.client(**client_kwargs)
    logger.info("dynamodb_client_initialized", region=region, endpoint=endpoint_url)
    return client
