"""Typed failures raised by the domain services.

Routers translate these into HTTP responses (see `careerlink.routers.errors`); services
never swallow a conflict into a silent no-op.
"""

from __future__ import annotations


class DomainError(Exception):
    code = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    code = "validation_error"


class InactiveProgramError(ValidationError):
    code = "inactive_program"


class NotFoundError(DomainError):
    code = "not_found"


class AuthorizationError(DomainError):
    code = "forbidden"


class ConflictError(DomainError):
    code = "conflict"


class AlreadyEnrolledInProgramError(ConflictError):
    code = "already_enrolled_in_program"


class AlreadyEnrolledElsewhereError(ConflictError):
    code = "already_enrolled_elsewhere"


class ProgramFullError(ConflictError):
    code = "program_full"


class InvalidTransitionError(ConflictError):
    code = "invalid_transition"


class TransientStoreError(DomainError):
    code = "store_unavailable"
