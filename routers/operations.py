from fastapi import APIRouter, HTTPException, Path, Response, status

from async_manager import async_operation_manager
from models.async_response import OperationStatus, OperationStatusResponse

router = APIRouter(prefix="/operations", tags=["operations"])


@router.get("/{operation_id}", response_model=OperationStatusResponse)
async def get_operation_status(response: Response, operation_id: str = Path(..., description="Operation ID")):
    """Poll the status of an async operation."""
    operation = await async_operation_manager.get_operation(operation_id)
    if not operation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Operation {operation_id} not found"
        )

    if operation.status == OperationStatus.COMPLETED and operation.result:
        etag = operation.result.get("etag")
        if etag:
            response.headers["ETag"] = etag

    return OperationStatusResponse(
        operation_id=operation.operation_id,
        status=operation.status,
        message=operation.message,
        progress_percent=operation.progress_percent,
        created_at=operation.created_at,
        updated_at=operation.updated_at,
        result=operation.result,
        error=operation.error
    )
