# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
HTTP API exposing container lookups.

Routes:
    GET /_self                 record of the calling container
    GET /info/{container_id}   record of a container by full or short id
"""
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..MODELS.settings import ServerSettings
from ..SERVICES.lookup_service import LookupService
from ..UTILS.addresses import resolve_client_address
from ..errors import AddressUnresolvable, ContainerNotFound, ProviderUnavailable

logger = logging.getLogger(__name__)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message},
        headers={"Cache-Control": "no-cache"},
    )


def create_app(lookup: LookupService,
               settings: Optional[ServerSettings] = None) -> FastAPI:
    """
    Builds the FastAPI application serving lookups.

    :param lookup: Lookup service backing the routes.
    :param settings: Server settings, defaults are used if omitted.
    :return: The application.
    """
    settings = settings or ServerSettings()
    app = FastAPI(title="dockinfo", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["Origin", "Content-Type"],
        allow_credentials=False,
        max_age=3600,
    )

    @app.middleware("http")
    async def no_cache(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-cache"
        return response

    @app.exception_handler(ProviderUnavailable)
    async def provider_unavailable(request: Request, exc: ProviderUnavailable):
        logger.error(f"Containers info could not be loaded. err={exc}")
        return _message(503, "Containers info could not be loaded")

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        # runs outside the no_cache middleware
        logger.error(f"Unexpected error serving {request.url.path}", exc_info=exc)
        return _message(500, "Internal server error")

    @app.get("/_self")
    def info_self(request: Request):
        host = request.client.host if request.client else None
        try:
            ip = resolve_client_address(host)
        except AddressUnresolvable as e:
            logger.debug(f"Error getting remote IP. err={e}")
            return _message(400, "Couldn't determine caller IP from request")
        logger.debug(f"Request source IP={ip}")

        try:
            record = lookup.by_address(ip)
        except ContainerNotFound as e:
            logger.debug(f"Couldn't find container info for container with IP. err={e}")
            return _message(404, f"Couldn't find info for container with IP {ip}")
        return record.to_flat()

    @app.get("/info/{container_id}")
    def info_container_id(container_id: str):
        logger.debug(f"Getting info for containerId={container_id}")
        try:
            record = lookup.by_key(container_id)
        except ContainerNotFound as e:
            logger.debug(f"Couldn't find container info for id={container_id}. err={e}")
            return _message(404, f"Couldn't get info for container {container_id}")
        return record.to_flat()

    return app


def serve(app: FastAPI, settings: ServerSettings) -> None:
    """
    Runs the HTTP server until interrupted.
    """
    logger.info(f"Starting HTTP Server on {settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.value,
    )
