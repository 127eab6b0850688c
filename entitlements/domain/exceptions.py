"""Domain exceptions for the entitlement service.

Defines domain-level exceptions that represent authorization outcomes and
catalog rule violations. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class EntitlementException(Exception):
    """Base exception for all entitlement errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description (safe to show to the caller).
        error_code: Machine-readable error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the uniform error body: success flag, code, message, details."""
        return {
            "success": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(EntitlementException):
    """Raised when input validation fails (e.g. malformed key or out-of-range level)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(EntitlementException):
    """Raised when no valid actor identity accompanies the request."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class CapabilityDeniedException(EntitlementException):
    """Raised when the actor lacks the required permission key.

    Details carry the required key, the actor's role name, the actions the
    actor does hold in that key's module, and a static suggestion.
    """

    def __init__(
        self,
        required_permission: str,
        user_role: str,
        available_actions: list[str],
        suggestion: str,
    ) -> None:
        """Initialize with the denial context.

        Args:
            required_permission: Permission key that was required (e.g. 'campaigns_delete').
            user_role: Name of the actor's primary role.
            available_actions: Actions the actor holds in the same module.
            suggestion: Static hint shown to the caller.
        """
        module, _, action = required_permission.rpartition("_")
        if available_actions:
            hint = f"You can only: {', '.join(available_actions)}."
        else:
            hint = f"You don't have any permissions for the {module} module."
        super().__init__(
            f"Access denied. You don't have permission to {action} {module}. {hint}",
            "CAPABILITY_DENIED",
            {
                "requiredPermission": required_permission,
                "userRole": user_role,
                "availableActions": list(available_actions),
                "suggestion": suggestion,
            },
        )


class ModuleAccessDeniedException(EntitlementException):
    """Raised when the actor holds no permission at all in a required module."""

    def __init__(self, required_module: str, user_role: str, suggestion: str) -> None:
        super().__init__(
            f"Access denied. No permissions for module: {required_module}",
            "CAPABILITY_DENIED",
            {
                "requiredModule": required_module,
                "userRole": user_role,
                "availableActions": [],
                "suggestion": suggestion,
            },
        )


class OwnershipDeniedException(EntitlementException):
    """Raised when a non-elevated actor targets a row owned by someone else."""

    def __init__(self, resource_type: str | None = None) -> None:
        """Initialize with optional resource type (never the owner's identity).

        Args:
            resource_type: Optional resource kind (e.g. 'campaign').
        """
        details: dict[str, Any] = {"reason": "not the owner of this resource"}
        if resource_type:
            details["resourceType"] = resource_type
        super().__init__(
            "Access denied. You are not the owner of this resource.",
            "OWNERSHIP_DENIED",
            details,
        )


class CatalogConflictException(EntitlementException):
    """Raised when creating or renaming a catalog entity collides with an existing one."""

    def __init__(self, entity_type: str, field: str, value: str) -> None:
        """Initialize with the conflicting entity, field, and value.

        Args:
            entity_type: 'module', 'permission', 'role', or 'binding'.
            field: Unique field that collided (e.g. 'name', 'key').
            value: The duplicate value.
        """
        super().__init__(
            f"A {entity_type} with {field} '{value}' already exists",
            "CATALOG_CONFLICT",
            {"entity_type": entity_type, "field": field, "value": value},
        )


class CatalogInUseException(EntitlementException):
    """Raised when a delete or change is blocked by entities still referencing the target."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        reason: str,
        error_code: str = "CATALOG_IN_USE",
        **details_extra: Any,
    ) -> None:
        """Initialize with the blocked entity and reason.

        Args:
            entity_type: Type of entity that could not be changed (e.g. 'role').
            entity_id: Its identifier.
            reason: Human-readable reason (e.g. 'role has 2 active binding(s)').
            error_code: Override for specialised subclasses.
            **details_extra: Optional keys merged into details (e.g. active_bindings).
        """
        super().__init__(
            f"Cannot modify {entity_type}: {reason}",
            error_code,
            {"entity_type": entity_type, "entity_id": entity_id, **details_extra},
        )


class SystemRoleProtectedException(CatalogInUseException):
    """Raised when deleting or renaming a role flagged is_system_role."""

    def __init__(self, role_id: str) -> None:
        super().__init__(
            "role",
            role_id,
            "system roles cannot be deleted or renamed",
            error_code="SYSTEM_ROLE_PROTECTED",
        )


class ResourceNotFoundException(EntitlementException):
    """Raised when a requested catalog resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'module').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(EntitlementException):
    """Raised when an operation requires the SQL store but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
