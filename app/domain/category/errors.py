# -*- coding: utf-8 -*-
"""
카테고리 삭제 서비스 예외
"""


class CategoryServiceError(Exception):
    pass


class BootstrapError(CategoryServiceError):
    """시크릿 조회/디코딩 실패. 서비스 기동 자체가 중단된다."""


class PartitionDeleteError(CategoryServiceError):
    """단일 파티션(테이블) 삭제 실패"""

    def __init__(self, partition: str, cause: Exception):
        self.partition = partition
        self.cause = cause
        super().__init__(f"Failed to delete from {partition}: {cause}")


class PublishError(CategoryServiceError):
    """브로커 미연결 또는 발행 거부. 로그만 남기고 호출자에게 전달하지 않는다."""
