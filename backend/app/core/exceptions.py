class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised when exam or change data is missing or malformed."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ConflictError(AppError):
    """Raised when a mutation collides with existing bookings and cannot be parked."""
    def __init__(self, message: str, conflicts: list[dict] | None = None):
        super().__init__(message, status_code=409, details={"conflicts": conflicts or []})

class PermissionDeniedError(AppError):
    """Raised when the actor does not own the record and is not an admin."""
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, status_code=403)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )

class UnknownChangeTypeError(AppError):
    """Raised for an offline change whose type is not recognized."""
    def __init__(self, change_type):
        super().__init__(
            f"Unknown change type: {change_type}",
            status_code=400,
            details={"type": change_type},
        )

class UnknownActionError(AppError):
    """Raised for an offline change whose action is not valid for its type."""
    def __init__(self, change_type: str, action):
        super().__init__(
            f"Unknown {change_type} action: {action}",
            status_code=400,
            details={"type": change_type, "action": action},
        )

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
