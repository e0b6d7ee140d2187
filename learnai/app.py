import math

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from learnai.config import create_db, get_settings
from learnai.errors import LearnAIError, RateLimitError, ValidationError
from learnai.routes.insight_routes import insight_routes
from learnai.routes.tutor_routes import tutor_routes
from learnai.routes.user_routes import user_routes
from learnai.routes.ws_routes import ws_routes
from learnai.utils.common import format_field_errors
from learnai.utils.logger import clear_request_id, configure_logging, set_request_id
from learnai.utils.rate_limit import SlidingWindowRateLimiter, client_key

settings = get_settings()
logger = configure_logging()
create_db()

app = FastAPI(title="LearnAI")
app.state.general_limiter = SlidingWindowRateLimiter(
    settings.GENERAL_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS, name="general"
)
app.state.ai_limiter = SlidingWindowRateLimiter(
    settings.AI_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS, name="ai"
)


def _rate_limited_response(exc: RateLimitError) -> JSONResponse:
    retry_after = max(1, math.ceil(exc.retry_after))
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(),
        headers={"Retry-After": str(retry_after)},
    )


@app.middleware("http")
async def general_rate_limit(request: Request, call_next):
    if request.url.path.startswith("/api/"):
        limiter: SlidingWindowRateLimiter = request.app.state.general_limiter
        key = client_key(request, settings.TRUSTED_PROXY_HOPS)
        decision = limiter.hit(key)
        if not decision.allowed:
            logger.warning("rate limited limiter=general path=%s client=%s", request.url.path, key)
            return _rate_limited_response(RateLimitError(retry_after=decision.retry_after))
    return await call_next(request)


# Registered last so it runs outermost: every response, including 429s, carries the request id.
@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    try:
        logger.info("request start method=%s path=%s client=%s", request.method, request.url.path, request.client)
        response: Response = await call_next(request)
        logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        response.headers["x-request-id"] = rid
        return response
    except Exception:
        logger.exception("request error method=%s path=%s", request.method, request.url.path)
        raise
    finally:
        clear_request_id()


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LearnAIError)
async def learnai_exception_handler(request: Request, exc: LearnAIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("app error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("app error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.message)
    if isinstance(exc, RateLimitError):
        return _rate_limited_response(exc)
    if exc.status_code >= 500:
        # Never leak internal exception details to clients.
        return JSONResponse(status_code=exc.status_code, content={"message": "Internal Server Error"})
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(format_field_errors(exc.errors()))
    logger.warning("validation error method=%s path=%s errors=%s", request.method, request.url.path, error.errors)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "LearnAI is Healthy"}


app.include_router(user_routes, prefix="/api")
app.include_router(tutor_routes, prefix="/api")
app.include_router(insight_routes, prefix="/api")
app.include_router(ws_routes)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
