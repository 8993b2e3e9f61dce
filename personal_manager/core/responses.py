"""
Response envelopes.

Success: {"success": true, "data": ..., "message": ..., "timestamp": ...}
Failure: {"success": false, "error": {type, severity, message, suggestion}, "timestamp": ...}
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from personal_manager.core.errors import StoreError
from personal_manager.utils.clock import utcnow


def ok(data: Any = None, message: Optional[str] = "Operation completed successfully") -> dict:
    return {"success": True, "data": data, "message": message, "timestamp": utcnow()}


def error_response(error: StoreError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder({"success": False, "error": error.to_dict(), "timestamp": utcnow()}),
    )
