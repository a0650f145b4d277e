"""
Custom Exception Classes for the Headless CMS

This module defines custom exceptions for consistent error handling across
the HTTP layer, the GraphQL resolvers and headless schema composition.

Schema composition errors are configuration errors: they are raised while the
GraphQL schema is generated at startup and abort it before anything is
published.
"""

from typing import Any

from fastapi import status


class CMSException(Exception):
    """Base exception class for all CMS-related exceptions"""

    error_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CMSException):
    """Base class for resource not found errors"""

    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ContentEntryNotFoundError(ResourceNotFoundError):
    """Raised when a content entry is not found"""

    def __init__(self, model_id: str, entry_id: Any | None = None):
        super().__init__(resource_type=f"Entry of model '{model_id}'", resource_id=entry_id)


class ContentModelNotFoundError(ResourceNotFoundError):
    """Raised when a content model is not found"""

    def __init__(self, model_id: str | None = None):
        super().__init__(resource_type="Content model", resource_id=model_id)


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(CMSException):
    """Raised when input validation fails"""

    error_code = "VALIDATION_FAILED"

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


# ============================================================================
# Schema Composition Exceptions
# ============================================================================


class SchemaCompositionError(CMSException):
    """Raised when the headless GraphQL schema cannot be generated"""

    error_code = "SCHEMA_COMPOSITION_FAILED"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details or {})


class UnknownFieldTypeError(SchemaCompositionError):
    """Raised when a field type tag has no registered field-type plugin"""

    def __init__(self, field_type: str, model_id: str | None = None, field_id: str | None = None):
        message = f"Unknown field type '{field_type}'"
        if model_id is not None:
            message = f"Unknown field type '{field_type}' on field '{field_id}' of model '{model_id}'"
        super().__init__(
            message=message,
            details={"field_type": field_type, "model_id": model_id, "field_id": field_id},
        )
        self.field_type = field_type
        self.model_id = model_id
        self.field_id = field_id


class DuplicateFieldTypeError(SchemaCompositionError):
    """Raised when two field-type plugins claim the same type tag"""

    def __init__(self, field_type: str):
        super().__init__(
            message=f"Field type '{field_type}' is already registered",
            details={"field_type": field_type},
        )
        self.field_type = field_type


class MissingPluginCapabilityError(SchemaCompositionError):
    """Raised when a plugin lacks a capability that is required for a render mode"""

    def __init__(self, plugin: str, mode: str, capability: str, model_id: str | None = None):
        message = f"Plugin '{plugin}' does not provide '{capability}' for {mode} mode"
        if model_id is not None:
            message += f" (required by model '{model_id}')"
        super().__init__(
            message=message,
            details={"plugin": plugin, "mode": mode, "capability": capability, "model_id": model_id},
        )


class DuplicateTypeNameError(SchemaCompositionError):
    """Raised when a generated type or root field name is produced twice"""

    def __init__(self, name: str, owners: list[str]):
        super().__init__(
            message=f"Generated name '{name}' is produced by more than one source: {', '.join(owners)}",
            details={"name": name, "owners": owners},
        )
        self.name = name
        self.owners = owners


class DuplicateFieldError(SchemaCompositionError):
    """Raised when a model declares the same field twice or shadows a common field"""

    def __init__(self, model_id: str, field_id: str):
        super().__init__(
            message=f"Field '{field_id}' is declared more than once on model '{model_id}'",
            details={"model_id": model_id, "field_id": field_id},
        )


class InvalidModelIdError(SchemaCompositionError):
    """Raised when no valid GraphQL type name can be derived from a model id"""

    def __init__(self, model_id: str):
        super().__init__(
            message=f"Cannot derive a GraphQL type name from model id '{model_id}'",
            details={"model_id": model_id},
        )
