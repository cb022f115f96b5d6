"""Standardized API error responses.

Registered as DRF's ``EXCEPTION_HANDLER``.  Every error leaves the API
with the same envelope::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": "field" | null}]
    }

Domain errors (``shared.domain.exceptions.DomainError``) are translated
by their stable ``code``; DRF and pydantic errors are flattened so
nested serializer errors keep a dotted ``attr`` path.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from shared.domain.exceptions import DomainError

logger = structlog.get_logger(__name__)

STATUS_BY_CODE: Dict[str, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "index_out_of_range": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_409_CONFLICT,
    "already_exists": status.HTTP_409_CONFLICT,
    "not_authenticated": status.HTTP_401_UNAUTHORIZED,
}


def standardized_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    if isinstance(exc, DomainError):
        status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
        logger.warning(
            "api.domain_error",
            code=exc.code,
            detail=str(exc),
            view=_view_name(context),
        )
        error_type = "validation_error" if exc.code == "validation_error" else "client_error"
        return Response(
            _envelope(error_type, [_error(exc.code, str(exc))]),
            status=status_code,
        )

    if isinstance(exc, PydanticValidationError):
        errors = [
            _error(
                "invalid",
                err["msg"],
                ".".join(str(part) for part in err["loc"]) or None,
            )
            for err in exc.errors()
        ]
        return Response(
            _envelope("validation_error", errors),
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        error_type = "validation_error"
        errors = _flatten(exc.detail)
    else:
        error_type = "server_error" if response.status_code >= 500 else "client_error"
        detail = getattr(exc, "detail", str(exc))
        errors = [_error(getattr(detail, "code", "error"), str(detail))]

    response.data = _envelope(error_type, errors)
    return response


def _flatten(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            if key == "non_field_errors":
                child = attr
            else:
                child = f"{attr}.{key}" if attr else str(key)
            errors.extend(_flatten(value, child))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                child = f"{attr}.{index}" if attr else str(index)
                errors.extend(_flatten(value, child))
            else:
                errors.extend(_flatten(value, attr))
        return errors
    return [_error(getattr(detail, "code", "invalid"), str(detail), attr)]


def _error(code: str, detail: str, attr: Optional[str] = None) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr}


def _envelope(error_type: str, errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": error_type, "errors": errors}


def _view_name(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return type(view).__name__ if view is not None else ""
