"""Mapping of service results onto HTTP responses."""
from fastapi import status
from fastapi.responses import JSONResponse

from broking_api.services.result_objects import ErrorCode, ServiceResult

# Blocked deletes are reported as client errors with a remedy in the message
_STATUS_BY_ERROR_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.STORE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(result: ServiceResult) -> JSONResponse:
    """Build the ``{"error": ...}`` response for a failed service result."""
    status_code = _STATUS_BY_ERROR_CODE.get(
        result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content={"error": result.message})
