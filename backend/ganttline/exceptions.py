"""
Structured exceptions and error responses for Ganttline.

Provides consistent error handling across the scheduler and the API with:
- Custom exception classes carrying an error code and HTTP status
- Structured error response format
- FastAPI exception handlers
"""

from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

# Starlette renamed the 422 constant between releases; the code itself is stable
HTTP_422 = 422


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # Location of error (e.g., ["tasks", "B"])
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "cycle_detected")
    message: str
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class GanttlineException(Exception):
    """Base exception for all Ganttline errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class CycleDetectedError(GanttlineException):
    """The dependency relation is not a DAG."""

    def __init__(self, cycle: List[str]):
        path = " -> ".join(cycle + cycle[:1])
        super().__init__(
            message=f"Task dependencies contain a cycle: {path}",
            error_code="cycle_detected",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[{
                "loc": ["tasks", task_id],
                "msg": f"Task {task_id} is part of a dependency cycle",
                "type": "cycle_error",
            } for task_id in cycle],
        )
        self.cycle = cycle


class DanglingDependencyError(GanttlineException):
    """A dependency id does not match any task in the set."""

    def __init__(self, missing_id: str, task_id: str):
        super().__init__(
            message=f"Task {task_id} depends on unknown task {missing_id}",
            error_code="dangling_dependency",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[{
                "loc": ["tasks", task_id, "dependency_ids"],
                "msg": f"No task with id {missing_id}",
                "type": "dangling_reference",
            }],
        )
        self.missing_id = missing_id
        self.task_id = task_id


class InvalidDurationError(GanttlineException):
    """A task's estimated hours are zero, negative or not a number."""

    def __init__(
        self,
        task_id: str,
        hours: float,
        reason: str = "Estimated hours must be a positive number",
    ):
        super().__init__(
            message=f"Task {task_id} has invalid estimated hours: {hours}",
            error_code="invalid_duration",
            status_code=HTTP_422,
            details=[{
                "loc": ["tasks", task_id, "estimated_hours"],
                "msg": reason,
                "type": "value_error",
            }],
        )
        self.task_id = task_id
        self.hours = hours


class DuplicateTaskError(GanttlineException):
    """Two tasks share the same id."""

    def __init__(self, task_id: str):
        super().__init__(
            message=f"Task id {task_id} is used more than once",
            error_code="duplicate_task",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
        self.task_id = task_id


class SelfDependencyError(CycleDetectedError):
    """Task cannot depend on itself: a cycle of length one."""

    def __init__(self, task_id: str):
        super().__init__([task_id])
        self.message = f"Task {task_id} cannot depend on itself"
        self.error_code = "self_dependency"
        self.args = (self.message,)
        self.task_id = task_id


class ValidationError(GanttlineException):
    """Request validation error."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            status_code=HTTP_422,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def ganttline_exception_handler(request: Request, exc: GanttlineException) -> JSONResponse:
    """Handle GanttlineException and return structured response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(GanttlineException, ganttline_exception_handler)
