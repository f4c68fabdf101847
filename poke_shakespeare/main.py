import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from poke_shakespeare.config import Settings
from poke_shakespeare.dependencies import build_pokemon_service, get_lookup_request, get_pokemon_service
from poke_shakespeare.models import ErrorKind, ErrorResponse, LookupFailure, LookupRequest, PokemonResponse
from poke_shakespeare.services.pokemon_service import PokemonService

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}

router = APIRouter()


@router.get(
    "/pokemon/{name}",
    response_model=PokemonResponse,
    summary="Returns the Shakespearean description of a Pokemon",
    responses={code: {"model": ErrorResponse} for code in (400, *STATUS_BY_KIND.values())},
)
async def get_shakespearean_description(
    response: Response,
    lookup: LookupRequest = Depends(get_lookup_request),
    refresh: bool = False,
    service: PokemonService = Depends(get_pokemon_service),
):
    """Fetches the species description from PokeAPI and translates it to Shakespearean English."""
    result = await service.describe(lookup, bypass_cache=refresh)

    if isinstance(result, LookupFailure):
        # Only the error kind leaves the service; details were logged by the orchestrator
        return JSONResponse(
            status_code=STATUS_BY_KIND[result.kind],
            content=ErrorResponse(error=result.kind.value).model_dump(),
        )

    response.headers["X-Cache"] = "HIT" if result.cached else "MISS"
    return PokemonResponse(name=result.name, description=result.description)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Serializes every framework-level HTTP error (400, unknown route, 405) as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed query parameters are a 400; the parser output stays in the logs."""
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="invalid_request").model_dump(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Logs the error and never exposes internal details to clients."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal Server Error").model_dump(),
    )


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One service (and therefore one shared cache) per running app
        app.state.pokemon_service = build_pokemon_service(settings)
        logger.info(
            f"Starting Shakespearean Pokedex (cache={settings.cache_backend}, "
            f"translator_mock={settings.translator_mock})"
        )
        yield
        logger.info("Shutting down Shakespearean Pokedex")
        await app.state.pokemon_service.close()

    app = FastAPI(
        title="Shakespearean Pokedex API",
        description="Pokemon descriptions, translated to Shakespearean English.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router)
    return app

