"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: All service-layer methods return ServiceResult. Codec exceptions
are converted here and never escape a service method.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from typedwire.errors import TypedwireError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: TypedwireError) -> ServiceError:
        """Build an error payload from a codec exception."""
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"encode"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls, op: str, code: str, message: str, **detail: Any
    ) -> ServiceResult:
        """Shorthand for a failed result."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @classmethod
    def from_exception(cls, op: str, exc: TypedwireError) -> ServiceResult:
        """Wrap a codec exception as a failed result."""
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
