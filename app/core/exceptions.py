from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class NotFoundError(AppException):
    def __init__(self, message: str = "Resource not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            message=message,
            status_code=404,
            error_code=error_code
        )

class EmployeeNotFoundError(NotFoundError):
    def __init__(self, employee_id: int):
        super().__init__(
            message=f"Employee {employee_id} not found",
            error_code="EMPLOYEE_NOT_FOUND"
        )
        self.details = {"employee_id": employee_id}

class InvalidPeriodError(AppException):
    """Raised when a requested year/month cannot be turned into a date range."""
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_PERIOD"
        )
