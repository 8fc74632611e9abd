# src/fcrepo_ref_server/main.py
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fcrepo_ref_server.config import settings
from fcrepo_ref_server.api.health import router as health_router
from fcrepo_ref_server.api.versions import router as versions_router
from fcrepo_ref_server.api.resources import router as resources_router
from fcrepo_ref_server.api.errors import http_exception_handler, request_validation_exception_handler

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Digital Object Repository Reference Server",
    description="In-memory repository of objects and datastreams with tombstones and versions.",
    version="0.1.0",
)

app.include_router(health_router)
# version routes must be matched before the catch-all resource routes
app.include_router(versions_router)
app.include_router(resources_router)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting repository server on %s:%d", settings.SERVER_HOST, settings.SERVER_PORT)
    uvicorn.run(
        "fcrepo_ref_server.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
