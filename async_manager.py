"""Async operations manager for tracking background writes."""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Optional, Dict, Any, Coroutine
from dataclasses import dataclass

from fastapi import HTTPException

from models.async_response import OperationStatus

logger = logging.getLogger(__name__)


@dataclass
class AsyncOperation:
    """Represents a single async operation."""
    operation_id: str
    status: OperationStatus
    message: str
    created_at: datetime
    updated_at: datetime
    progress_percent: int = 0
    result: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None
    task: Optional[asyncio.Task] = None


def describe_error(e: Exception) -> Dict[str, Any]:
    """Error payload stored on a failed operation."""
    if isinstance(e, HTTPException):
        return {
            "type": type(e).__name__,
            "message": str(e.detail),
            "status_code": e.status_code,
        }
    return {
        "type": type(e).__name__,
        "message": str(e)
    }


class AsyncOperationManager:
    """Manages async operations with in-memory storage."""

    def __init__(self):
        self._operations: Dict[str, AsyncOperation] = {}
        self._lock = asyncio.Lock()

    async def create_operation(
        self,
        message: str,
        coroutine: Coroutine
    ) -> str:
        """
        Create a new async operation and start executing the coroutine.

        Args:
            message: Human-readable message describing the operation
            coroutine: The coroutine to execute asynchronously

        Returns:
            operation_id: Unique identifier for tracking the operation
        """
        operation_id = f"op-{uuid.uuid4()}"
        now = datetime.utcnow()

        operation = AsyncOperation(
            operation_id=operation_id,
            status=OperationStatus.PENDING,
            message=message,
            created_at=now,
            updated_at=now,
            progress_percent=0
        )

        async with self._lock:
            self._operations[operation_id] = operation

        task = asyncio.create_task(self._execute_operation(operation_id, coroutine))
        operation.task = task

        return operation_id

    async def _execute_operation(self, operation_id: str, coroutine: Coroutine):
        """Execute the coroutine and update operation status."""
        operation = self._operations[operation_id]
        base_message = operation.message

        try:
            async with self._lock:
                operation.status = OperationStatus.IN_PROGRESS
                operation.updated_at = datetime.utcnow()
                operation.progress_percent = 10
                operation.message = f"{base_message}... (in progress)"

            result = await coroutine

            async with self._lock:
                operation.status = OperationStatus.COMPLETED
                operation.updated_at = datetime.utcnow()
                operation.progress_percent = 100
                operation.result = result
                operation.message = f"{base_message} (completed)"

        except Exception as e:
            logger.warning("Operation %s failed: %s", operation_id, e)
            async with self._lock:
                operation.status = OperationStatus.FAILED
                operation.updated_at = datetime.utcnow()
                operation.error = describe_error(e)
                operation.message = f"{base_message} (failed)"

    async def get_operation(self, operation_id: str) -> Optional[AsyncOperation]:
        """Get the status of an operation."""
        async with self._lock:
            return self._operations.get(operation_id)


# Global instance
async_operation_manager = AsyncOperationManager()
