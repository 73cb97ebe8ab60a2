"""Error taxonomy, service results and global HTTP error handling."""
from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from flask import Flask, jsonify
from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class ServiceError(Exception):
    code = "error"
    status = 400

    def __init__(self, message: str, *, errors: Optional[Dict[str, list[str]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(ServiceError):
    code = "validation_error"
    status = 422


class NotFound(ServiceError):
    code = "not_found"
    status = 404


class PermissionDenied(ServiceError):
    code = "permission_denied"
    status = 403


class Unauthenticated(ServiceError):
    code = "unauthorized"
    status = 401


class Conflict(ServiceError):
    code = "conflict"
    status = 409


class ExternalServiceError(ServiceError):
    code = "external_service_error"
    status = 502


class StorageError(Exception):
    """Raised by storage backends when an object cannot be written or removed."""


class LLMError(Exception):
    """Raised by LLM providers on transport or response errors."""


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Discriminated success/failure returned by every public service call."""

    ok: bool
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ServiceError) -> "Result[T]":
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        if not self.ok:
            assert self.error is not None
            raise self.error
        return self.value  # type: ignore[return-value]


GENERIC_FAILURE = "Something went wrong while talking to an external service. Please try again."


def returns_result(fn: Callable[..., T]) -> Callable[..., Result[T]]:
    """Turn raised service errors and backend exceptions into a failed Result."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Result[T]:
        try:
            return Result.success(fn(*args, **kwargs))
        except ServiceError as e:
            logger.info("{} refused: {} ({})", fn.__qualname__, e.message, e.code)
            return Result.failure(e)
        except (SQLAlchemyError, StorageError, LLMError) as e:
            logger.exception("{} failed: {}", fn.__qualname__, e)
            return Result.failure(ExternalServiceError(GENERIC_FAILURE))

    return wrapper


def field_errors(err: ValidationError) -> Dict[str, list[str]]:
    errors: Dict[str, list[str]] = {}
    for item in err.errors():
        field = ".".join(str(p) for p in item.get("loc", ())) or "__root__"
        errors.setdefault(field, []).append(item.get("msg", "invalid value"))
    return errors


def parse_payload(model: type[M], data: Any) -> Result[M]:
    """Validate raw request data against a schema without raising."""
    try:
        return Result.success(model.model_validate(data if data is not None else {}))
    except ValidationError as e:
        return Result.failure(ValidationFailed("Invalid form data.", errors=field_errors(e)))


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)
    def service_error(err: ServiceError):  # type: ignore[override]
        return jsonify(err.to_dict()), err.status

    @app.errorhandler(400)
    def bad_request(err: Exception):  # type: ignore[override]
        return jsonify({"error": "bad_request", "message": _describe(err)}), 400

    @app.errorhandler(404)
    def not_found(err: Exception):  # type: ignore[override]
        return jsonify({"error": "not_found", "message": _describe(err)}), 404

    @app.errorhandler(405)
    def method_not_allowed(err: Exception):  # type: ignore[override]
        return jsonify({"error": "method_not_allowed", "message": _describe(err)}), 405

    @app.errorhandler(413)
    def too_large(err: Exception):  # type: ignore[override]
        return jsonify({"error": "payload_too_large", "message": "File too large."}), 413

    @app.errorhandler(422)
    def unprocessable(err: Exception):  # type: ignore[override]
        return jsonify({"error": "unprocessable_entity", "message": _describe(err)}), 422

    @app.errorhandler(500)
    def internal(err: Exception):  # type: ignore[override]
        logger.error("unhandled error: {}", err)
        return jsonify({"error": "internal_server_error", "message": "unexpected error"}), 500


def _describe(err: Exception) -> str:
    if isinstance(err, HTTPException):
        return err.description or err.name
    return str(err)


def ok(data: Any, status: int = 200):
    return jsonify({"data": data}), status


def respond(result: Result[Any], status: int = 200, render: Optional[Callable[[Any], Any]] = None):
    """Render a service Result as the standard JSON envelope."""
    if not result.ok:
        assert result.error is not None
        return jsonify(result.error.to_dict()), result.error.status
    value = render(result.value) if render else result.value
    return ok(value, status)
