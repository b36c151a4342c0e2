import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from complaint_relay.config import configure_logging, API_KEY, RELAY_PATH
from complaint_relay.relay import RelayHandler

configure_logging()
logger = logging.getLogger(__name__)

# Credential is read once at import and never changes afterwards.
relay_handler = RelayHandler(api_key=API_KEY)


def get_relay_handler() -> RelayHandler:
    return relay_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Complaint relay starting up")
    if not relay_handler.has_credential:
        logger.warning("API_KEY is not set; every relay call will fail with a configuration error")
    yield
    logger.info("Complaint relay shutting down")


app = FastAPI(
    title="Complaint Relay",
    description="Relays complaint analysis, advice and resource requests to a generative model",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


@app.get("/health")
async def health_check() -> dict:
    return {"status": "ok"}


# Every method is routed here so the handler itself answers 405 for non-POST.
@app.api_route(RELAY_PATH, methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def gemini_proxy(
    request: Request,
    handler: RelayHandler = Depends(get_relay_handler),
) -> JSONResponse:
    body = await request.body()
    status, content = await handler.handle(request.method, body)
    return JSONResponse(status_code=status, content=content)
