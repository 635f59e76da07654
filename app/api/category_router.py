from fastapi import APIRouter, BackgroundTasks, Depends, Path, Request
from fastapi.responses import JSONResponse
from starlette import status

from app.domain.category.model.category import DeletionStatus
from app.domain.category.service.delete_category_service import CategoryDeletionService

router = APIRouter(
    prefix="/categories",
    tags=["category"]
)


def get_deletion_service(request: Request) -> CategoryDeletionService:
    return request.app.state.deletion_service


@router.delete(
    "/{name}",
    summary="Delete a category",
    responses={
        200: {
            "description": "Category deleted",
            "content": {"application/json": {"example": {"message": "Category deleted"}}},
        },
        500: {
            "description": "Error deleting category",
            "content": {
                "application/json": {
                    "example": {
                        "message": "Error deleting category",
                        "error": "Failed to delete from CategoriesUpdate_gr8: ...",
                        "deleted_partitions": ["Categories_gr8"],
                        "failed_partition": "CategoriesUpdate_gr8",
                        "skipped_partitions": ["CategoriesList_gr8", "CategoriesDelete_gr8"],
                    }
                }
            },
        },
    },
)
def delete_category_endpoint(
    background_tasks: BackgroundTasks,
    name: str = Path(..., min_length=1, description="Name of the category to delete"),
    service: CategoryDeletionService = Depends(get_deletion_service)
):
    """
    카테고리 삭제
    - name: 삭제할 카테고리 이름
    - 모든 파티션(테이블)에서 순서대로 삭제, 하나라도 실패하면 500
    - CategoryDeleted 이벤트는 응답 후 백그라운드에서 발행
    - 주의: 실패 전에 삭제된 파티션은 복구되지 않습니다 (deleted_partitions 참고)
    """
    outcome = service.delete_category(name, dispatch=background_tasks.add_task)

    if outcome.status is DeletionStatus.FAILED:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "Error deleting category",
                "error": str(outcome.error),
                "deleted_partitions": list(outcome.deleted_partitions),
                "failed_partition": outcome.failed_partition,
                "skipped_partitions": list(outcome.skipped_partitions),
            },
        )

    return {"message": "Category deleted"}
