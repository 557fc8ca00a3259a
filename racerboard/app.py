"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from racerboard.config import Config
from racerboard.datasources import ChainClient, GamesIdSource, IdentitySource, Web3ChainClient
from racerboard.errors import RacerboardError
from racerboard.services import IdentityCache, IdentityService, NonceStore
from racerboard.api import router, game_router
from racerboard.api.dependencies import set_dependencies

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def create_app(
    config: Config | None = None,
    chain_client: Optional[ChainClient] = None,
    identity_source: Optional[IdentitySource] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        chain_client: Chain client override. If None, a web3 client is built from config.
        identity_source: Identity upstream override. If None, Games ID is used.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    # Create upstream clients
    if chain_client is None:
        chain_client = Web3ChainClient(
            rpc_url=config.rpc_url,
            chain_id=config.chain_id,
            private_key=config.server_private_key,
        )
    if identity_source is None:
        identity_source = GamesIdSource(api_url=config.identity_api_url)

    identity_service = IdentityService(
        identity_source,
        cache=IdentityCache(),
        throttle_delay=config.identity_throttle_ms / 1000,
    )
    nonce_store = NonceStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Racerboard API")
        logger.info(f"Using RPC: {config.rpc_url} (chain {config.chain_id})")
        if config.contract_address:
            logger.info(f"Games registry contract: {config.contract_address}")
        else:
            logger.warning("CONTRACT_ADDRESS not set; chain queries will be rejected")
        if chain_client.signer_address:
            logger.info(f"Server signer: {chain_client.signer_address}")

        set_dependencies(config, chain_client, identity_service, nonce_store)

        yield

        # Shutdown
        logger.info("Shutting down...")
        await identity_source.close()
        await chain_client.close()

    app = FastAPI(
        title="Racerboard API",
        description="On-chain leaderboard, player history and score submission for Monad Racer",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(RacerboardError)
    async def racerboard_error_handler(request: Request, exc: RacerboardError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, "bad params")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return _error_response(500, str(exc) or "unknown_error")

    # Include API routes
    app.include_router(router)
    app.include_router(game_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
