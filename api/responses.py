"""
Calendar Service API - ServiceResult to HTTP mapping
=====================================================

Services report failures as values; this is the single place where
they become status codes and `{"error": ...}` bodies.
"""

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from schemas import ErrorDTO, ServiceResult


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorDTO(error=message).model_dump())


def result_response(result: ServiceResult) -> JSONResponse:
    """Success -> 200 with the serialized data, failure -> its status with an error body."""
    if not result.ok:
        return error_response(result.error, result.status_code)
    return JSONResponse(status_code=result.status_code, content=jsonable_encoder(result.data))
