# app/config.py
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


DEFAULT_CATEGORY_TABLES = (
    "Categories_gr8",
    "CategoriesUpdate_gr8",
    "CategoriesList_gr8",
    "CategoriesDelete_gr8",
)


@dataclass(frozen=True)
class Settings:
    aws_region: str = "us-east-2"
    secrets_lambda_name: str = "fetchSecretsFunction_gr8"
    secrets_timeout: float = 10.0
    category_tables: Tuple[str, ...] = DEFAULT_CATEGORY_TABLES
    dynamodb_endpoint_url: Optional[str] = None
    storage_timeout: float = 5.0
    rabbitmq_url: str = "amqp://localhost:5672/"
    category_events_queue: str = "category-events"
    broker_timeout: float = 5.0
    cors_origins: Tuple[str, ...] = ("*",)
    service_port: int = 8089
    log_level: str = "INFO"
    log_format: str = "console"


def _split(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def load_settings() -> Settings:
    """
    환경 변수(.env 포함)에서 서비스 설정을 읽는다.
    - CATEGORY_TABLES 는 콤마로 구분된 파티션(테이블) 목록, 순서가 곧 삭제 순서
    """
    tables = _split(os.getenv("CATEGORY_TABLES", ",".join(DEFAULT_CATEGORY_TABLES)))
    if not tables:
        raise ValueError("CATEGORY_TABLES must name at least one table")

    return Settings(
        aws_region=os.getenv("AWS_REGION", "us-east-2"),
        secrets_lambda_name=os.getenv("SECRETS_LAMBDA_NAME", "fetchSecretsFunction_gr8"),
        secrets_timeout=float(os.getenv("SECRETS_TIMEOUT_SECONDS", "10")),
        category_tables=tables,
        dynamodb_endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
        storage_timeout=float(os.getenv("STORAGE_TIMEOUT_SECONDS", "5")),
        rabbitmq_url=os.getenv("RABBITMQ_URL", "amqp://localhost:5672/"),
        category_events_queue=os.getenv("CATEGORY_EVENTS_QUEUE", "category-events"),
        broker_timeout=float(os.getenv("BROKER_TIMEOUT_SECONDS", "5")),
        cors_origins=_split(os.getenv("CORS_ORIGINS", "*")) or ("*",),
        service_port=int(os.getenv("SERVICE_PORT", "8089")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format=os.getenv("LOG_FORMAT", "console").lower(),
    )
