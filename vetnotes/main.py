import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vetnotes.config import CORS_ALLOW_ORIGINS, HOST, PORT, SERVICE_NAME
from vetnotes.errors import ValidationError
from vetnotes.models.api import ErrorResponse
from vetnotes.routers import generate, health, refine, relay
from vetnotes.services.llm import get_llm_client
from vetnotes.services.relay_store import RelayStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s...", SERVICE_NAME)
    client = get_llm_client()
    if client.available():
        logger.info("Generation provider: %s (%s)", client.provider, client.model)
    else:
        logger.warning("No LLM API key configured; running in stub-only mode")
    yield
    logger.info("%s shut down", SERVICE_NAME)


app = FastAPI(
    title="VetNotes",
    description="Veterinary documentation assistant - SOAP notes, toolbox helpers and consults",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.relay_store = RelayStore()

app.include_router(generate.router)
app.include_router(refine.router)
app.include_router(relay.router)
app.include_router(health.router)


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body") or "body"
        message = f"{loc}: {errors[0].get('msg', 'invalid value')}"
    else:
        message = "body: invalid request"
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
