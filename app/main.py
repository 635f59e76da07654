from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from app.api import category_router
from app.config import Settings, load_settings
from app.domain.category.service.delete_category_service import CategoryDeletionService
from app.infrastructure.messaging.event_publisher import EventPublisher, RabbitMQPublisher
from app.infrastructure.secrets.credential_bootstrapper import create_lambda_client, fetch_credentials
from app.infrastructure.storage.partition_store import DynamoPartitionStore, create_dynamodb_client
from app.utils.logging_config import configure_logging

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    *,
    lambda_client=None,
    dynamodb_client=None,
    publisher: Optional[EventPublisher] = None,
) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level, settings.log_format)

        # 자격 증명 없이는 요청을 받지 않음 (BootstrapError 가 그대로 올라가서 기동 실패)
        secrets_client = lambda_client or create_lambda_client(settings.aws_region, settings.secrets_timeout)
        credentials = await run_in_threadpool(fetch_credentials, secrets_client, settings.secrets_lambda_name)

        client = dynamodb_client or create_dynamodb_client(
            credentials,
            settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
            timeout=settings.storage_timeout,
        )

        # 브로커 연결 실패는 치명적이지 않음
        event_publisher = publisher or RabbitMQPublisher(
            settings.rabbitmq_url,
            settings.category_events_queue,
            timeout=settings.broker_timeout,
        )
        await run_in_threadpool(event_publisher.connect)

        app.state.deletion_service = CategoryDeletionService(
            DynamoPartitionStore(client),
            event_publisher,
            settings.category_tables,
        )
        logger.info("service_started", port=settings.service_port, partitions=list(settings.category_tables))

        try:
            yield
        finally:
            await run_in_threadpool(event_publisher.close)
            logger.info("service_stopped")

    app = FastAPI(
        title="Delete Category Service API",
        description="API for deleting categories",
        version="1.0.0",
        docs_url="/api-docs",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(category_router.router)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "Delete Category Service Running"

    return app


app = create_app()


def run():
    settings = load_settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.service_port)


if __name__ == "__main__":
    run()
