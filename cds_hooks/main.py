# -*- coding: utf-8 -*-
"""
CDS Hooks API - Main application entry point.

Registers the discovery/invocation routes and the health routes; the
clinical logic lives in services, rules, builders and assemblers.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cds_hooks import __version__
from cds_hooks.config import settings
from cds_hooks.routes import cds, health
from cds_hooks.utils.metrics import metrics

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="CDS Hooks Service",
    version=__version__,
    description="Clinical decision support over the CDS Hooks 2.0 protocol",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Unparseable or non-object bodies get the same 400 shape as schema errors
    metrics.record_error("validation")
    return JSONResponse(
        status_code=400,
        content={
            "error": "invalid_request",
            "message": "Request body must be a JSON object",
            "validationErrors": [
                f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()
            ],
        },
    )


# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(cds.router, tags=["cds-hooks"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cds_hooks.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL,
        reload=False
    )
