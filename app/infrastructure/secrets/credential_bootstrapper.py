# app/infrastructure/secrets/credential_bootstrapper.py
import json
from dataclasses import dataclass, field

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.domain.category.errors import BootstrapError

logger = structlog.get_logger()


@dataclass(frozen=True)
class Credentials:
    access_id: str
    access_secret: str = field(repr=False)


def create_lambda_client(region: str, timeout: float = 10.0):
    return boto3.client(
        "lambda",
        region_name=region,
        config=Config(connect_timeout=timeout, read_timeout=timeout, retries={"max_attempts": 0}),
    )


def fetch_credentials(lambda_client, function_name: str) -> Credentials:
    """
    시크릿 Lambda 를 한 번 호출해서 스토리지 자격 증명을 가져온다.
    - 응답 Payload: {"body": "{\"secret\": \"{...}\"}"} 또는 {"errorMessage": "..."}
    - 실패 시 BootstrapError (서비스 기동 중단)
    """
    try:
        response = lambda_client.invoke(FunctionName=function_name)
    except (BotoCoreError, ClientError) as e:
        logger.error("credentials_fetch_failed", function=function_name, error=str(e))
        raise BootstrapError(f"Error invoking Lambda function {function_name}") from e

    try:
        payload = json.loads(response["Payload"].read())
        error_message = payload.get("errorMessage")
        if not error_message:
            body = json.loads(payload["body"])
            secret = json.loads(body["secret"])
            credentials = Credentials(
                access_id=secret["AWS_ACCESS_KEY_ID"],
                access_secret=secret["AWS_SECRET_ACCESS_KEY"],
            )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error("credentials_decode_failed", function=function_name, error=repr(e))
        raise BootstrapError(f"Malformed secret payload from {function_name}") from e

    if error_message:
        logger.error("credentials_fetch_failed", function=function_name, error=error_message)
        raise BootstrapError(error_message)

    logger.info("credentials_fetched", function=function_name)
    return credentials
