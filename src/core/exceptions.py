from enum import StrEnum

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class AppError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class ErrorKind(StrEnum):
    CONFIGURATION = "configuration"
    TRANSPORT_FAILURE = "transport_failure"
    NO_IMAGE_IN_RESPONSE = "no_image_in_response"


class ServiceError(Exception):
    """Classified failure of an image edit call.

    ``message`` is user-facing and is shown verbatim by the front-end.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ServiceError):
    kind = ErrorKind.CONFIGURATION


class TransportFailure(ServiceError):
    kind = ErrorKind.TRANSPORT_FAILURE


class NoImageInResponse(ServiceError):
    kind = ErrorKind.NO_IMAGE_IN_RESPONSE

    DEFAULT_MESSAGE = "No image data was found in the API response."

    def __init__(self, message: str = DEFAULT_MESSAGE) -> None:
        super().__init__(message)


SERVICE_ERROR_STATUS = {
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.TRANSPORT_FAILURE: 502,
    ErrorKind.NO_IMAGE_IN_RESPONSE: 502,
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.warning("service_error", path=request.url.path, kind=str(exc.kind), error=exc.message)
    return JSONResponse(
        status_code=SERVICE_ERROR_STATUS.get(exc.kind, 500),
        content={"detail": exc.message, "kind": str(exc.kind)},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": errors})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
