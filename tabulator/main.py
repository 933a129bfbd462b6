import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tabulator.core.config import settings
from tabulator.api.v1.router import api_v1_router
from tabulator.dependencies import close_redis_service
from tabulator.services.base import (
	AuthenticationError,
	CacheError,
	DestinationWriteError,
	ServiceException,
	SourceUnavailableError,
	WorksheetNotFoundError,
)

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.include_router(api_v1_router, prefix="/api/v1")

# 子类在前，按顺序匹配
_STATUS_BY_ERROR = (
	(AuthenticationError, 401),
	(WorksheetNotFoundError, 404),
	(SourceUnavailableError, 502),
	(DestinationWriteError, 500),
	(CacheError, 503),
)


@app.exception_handler(ServiceException)
async def service_exception_handler(request: Request, exc: ServiceException) -> JSONResponse:
	status_code = 500
	for error_type, code in _STATUS_BY_ERROR:
		if isinstance(exc, error_type):
			status_code = code
			break
	return JSONResponse(
		status_code=status_code,
		content={
			"success": False,
			"code": exc.code,
			"message": str(exc),
			"details": exc.details,
		},
	)


@app.on_event("shutdown")
async def shutdown() -> None:
	await close_redis_service()
