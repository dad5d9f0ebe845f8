"""Typed failures raised by the registry services.

Routers never catch these; ``registry.main`` renders them as JSON responses.
"""

from __future__ import annotations

from fastapi import status


class RegistryError(Exception):
    code = "registry_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(RegistryError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidOperation(RegistryError):
    code = "invalid_operation"
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateEdge(RegistryError):
    code = "duplicate_edge"
    status_code = status.HTTP_409_CONFLICT


class ExhaustedSequence(RegistryError):
    code = "exhausted_sequence"
    status_code = status.HTTP_409_CONFLICT


class ConstraintViolation(RegistryError):
    code = "constraint_violation"
    status_code = status.HTTP_409_CONFLICT
