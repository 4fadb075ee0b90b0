#!/usr/bin/env python3
"""
Credgate - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Serves the HTTP API

All business logic is in the modules, following black box principles.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional, Type, TypeVar

import redis.asyncio as redis
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ValidationError

from credgate import __version__
from credgate.config.provider import ConfigProvider, EnvConfigProvider, StoreConfig
from credgate.errors import CredgateError, ErrorKind, StoreUnavailable
from credgate.logging_config import configure_logging, get_logging_config
from credgate.modules.api import (
    AuthRequest,
    DeleteRequest,
    ErrorResponse,
    MessageResponse,
    ModifyRequest,
    RegisterRequest,
    StatusResponse,
    TokenResponse,
)
from credgate.modules.auth import AuthFactory, Outcome, Services
from credgate.modules.outcome import FAILURE_MESSAGES

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.USERNAME_TAKEN: 409,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.STALE_OR_UNKNOWN_TOKEN: 401,
    ErrorKind.CONFIRMATION_REQUIRED: 400,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.STORE_UNAVAILABLE: 503,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

ModelT = TypeVar("ModelT", bound=BaseModel)


async def get_redis_client(store_config: StoreConfig) -> redis.Redis:
    """Create Redis client from configuration."""
    return redis.from_url(
        store_config.redis_url,
        password=store_config.redis_password,  # Passed separately to avoid URL encoding issues
        encoding="utf-8",
        decode_responses=True,
    )


def get_services(request: Request) -> Services:
    """Dependency returning the services built at startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise StoreUnavailable("Service not initialized")
    return services


def request_body(model: Type[ModelT]) -> Callable:
    """
    Build a dependency that validates a JSON or HTML form body into ``model``.

    Browsers post the account forms as ``application/x-www-form-urlencoded``;
    scripts send JSON. Both end up in the same pydantic model.

    Raises:
        RequestValidationError: If the body is malformed or does not validate
    """

    async def dependency(request: Request) -> ModelT:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            data = dict(await request.form())
        else:
            raw = await request.body()
            try:
                data = json.loads(raw) if raw else {}
            except ValueError:
                raise RequestValidationError(
                    [{"type": "json_invalid", "loc": ("body",), "msg": "Malformed JSON body"}]
                )
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError(e.errors()) from e

    return dependency


def failure_response(kind: ErrorKind) -> JSONResponse:
    """Render a failure. Only the generic message reaches the client."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(kind, 400),
        content={"error": FAILURE_MESSAGES[kind]},
    )


def outcome_failure(outcome: Outcome) -> JSONResponse:
    return failure_response(outcome.error)


router = APIRouter(prefix="/api", responses=ERROR_RESPONSES)


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    payload: RegisterRequest = Depends(request_body(RegisterRequest)),
    services: Services = Depends(get_services),
):
    """
    Register a new identity. No token is issued.

    Returns:
        201: Registered
        400: Username or password missing
        409: Username already exists
    """
    outcome = await services.auth.register(
        payload.username, payload.password, payload.profile_field or None
    )
    if not outcome.ok:
        return outcome_failure(outcome)
    return MessageResponse(message=outcome.message)


@router.post("/auth", response_model=TokenResponse)
async def authenticate(
    payload: AuthRequest = Depends(request_body(AuthRequest)),
    services: Services = Depends(get_services),
):
    """
    Exchange a username and password for a token.

    Returns:
        200: Token issued
        401: Invalid username or password
    """
    outcome = await services.auth.authenticate(payload.username, payload.password)
    if not outcome.ok:
        return outcome_failure(outcome)
    return TokenResponse(message=outcome.message, token=outcome.token)


@router.get("/status", response_model=StatusResponse, name="status")
async def status(
    token: Optional[str] = Query(None, description="Token from /auth or /modify"),
    services: Services = Depends(get_services),
):
    """
    Show the identity a token belongs to.

    Returns:
        200: Name, profile field and the same token
        401: Invalid or expired token
    """
    outcome = await services.session.status(token)
    if not outcome.ok:
        return outcome_failure(outcome)
    return StatusResponse(
        message=outcome.message,
        name=outcome.name,
        profile_field=outcome.profile_field,
        token=outcome.token,
    )


@router.post("/modify", status_code=303)
async def modify(
    request: Request,
    payload: ModifyRequest = Depends(request_body(ModifyRequest)),
    services: Services = Depends(get_services),
):
    """
    Change name and/or profile field.

    Returns:
        303: Redirect to /api/status with the newly issued token
        401: Invalid or expired token
        409: New username already exists
    """
    outcome = await services.session.modify(
        payload.token, payload.new_name, payload.new_profile_field
    )
    if not outcome.ok:
        return outcome_failure(outcome)
    location = request.url_for("status").include_query_params(token=outcome.token)
    return RedirectResponse(url=str(location), status_code=303)


@router.post("/delete", response_model=MessageResponse)
async def delete(
    payload: DeleteRequest = Depends(request_body(DeleteRequest)),
    services: Services = Depends(get_services),
):
    """
    Delete the token holder's identity.

    Returns:
        200: Deleted
        400: Deletion not confirmed
        401: Invalid or expired token
    """
    outcome = await services.session.delete(payload.token, payload.confirm)
    if not outcome.ok:
        return outcome_failure(outcome)
    return MessageResponse(message=outcome.message)


def create_app(config_provider: Optional[ConfigProvider] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config_provider: Configuration provider; environment variables
            are read at startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle - initialize and cleanup resources.
        """
        provider = config_provider or EnvConfigProvider()
        configure_logging(provider.get_api_config().log_level)
        logger.info("Starting Credgate API...")

        store_config = provider.get_store_config()
        redis_client = None
        if store_config.backend == "redis":
            redis_client = await get_redis_client(store_config)

        # Build the service stack via factory (dependency injection)
        app.state.services = AuthFactory.build(provider, redis_client)
        logger.info("Credgate API started successfully")

        yield

        logger.info("Shutting down Credgate API...")
        app.state.services = None
        if redis_client:
            await redis_client.aclose()
        logger.info("Credgate API shutdown complete")

    app = FastAPI(
        title="Credgate API",
        description="Credential and token authentication service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = None
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.exception_handler(CredgateError)
    async def credgate_error_handler(request: Request, exc: CredgateError):
        """Errors raised outside a service call, such as an unready service."""
        logger.warning(f"Request failed before reaching a service: {exc}")
        return failure_response(exc.kind)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Report malformed bodies as 400 in the common error shape."""
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"] if part != "body") or "body"
        return JSONResponse(
            status_code=400,
            content={"error": f"Invalid request: {field}: {first['msg']}"},
        )

    return app


app = create_app()


def main() -> None:
    """Run the API server with uvicorn."""
    provider = EnvConfigProvider()
    api_config = provider.get_api_config()
    # Use dict config for logging, not file path
    uvicorn.run(
        create_app(provider),
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        log_config=get_logging_config(api_config.log_level),
    )


if __name__ == "__main__":
    main()
