"""
Error taxonomy shared by services and HTTP handlers.

Services raise these; the error handlers in ``create_app`` turn them into JSON
responses with the matching status code.
"""
from __future__ import annotations

from typing import Any


class CrmError(RuntimeError):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidArgument(CrmError):
    status_code = 400

    def __init__(self, message: str, fields: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.fields = dict(fields or {})

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        if self.fields:
            d["fields"] = self.fields
        return d


class NotFound(CrmError):
    status_code = 404


class Conflict(CrmError):
    status_code = 409


class StoreFailure(CrmError):
    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
