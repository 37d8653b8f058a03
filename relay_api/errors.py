"""
异常到HTTP响应的统一转换
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from relay_core.exceptions import BaseStationException, ErrorCode
from relay_core.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_BY_CODE = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_PARAMETER: 422,
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.STATION_NOT_FOUND: 404,
    ErrorCode.STATION_CONFIG_INVALID: 422,
    ErrorCode.STATION_RESPONSE_INVALID: 502,
    ErrorCode.STATION_REQUEST_FAILED: 502,
    ErrorCode.NETWORK_ERROR: 502,
    ErrorCode.HTTP_STATUS_ERROR: 502,
    ErrorCode.CONNECTION_TIMEOUT: 504,
    ErrorCode.DATABASE_CONSTRAINT_VIOLATION: 409,
}


def status_code_for(exc: BaseStationException) -> int:
    return STATUS_BY_CODE.get(exc.error_code, 500)


async def station_exception_handler(request: Request, exc: BaseStationException) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"请求失败 {request.method} {request.url.path}: {exc}")
    else:
        logger.info(f"请求被拒绝 {request.method} {request.url.path}: {exc}")

    body = exc.to_dict()
    body.pop("cause", None)
    return JSONResponse(status_code=status_code, content={"error": body})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseStationException, station_exception_handler)
