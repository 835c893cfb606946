from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from .api.api import api_router
from .core.config import get_settings
from .core.errors import AutoNewsError
from .db.database import create_tables, get_session_maker
from .db.store import Store
from .services.seed import seed_demo_posts
from fastapi.responses import JSONResponse
import logging
import json
import traceback

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # make sure tables are created
    create_tables()
    if get_settings().seed_demo_posts:
        session = get_session_maker()()
        try:
            seed_demo_posts(Store(session))
        finally:
            session.close()
    yield

logger = logging.getLogger("fastapi")

app = FastAPI(title="AutoNews API", lifespan=lifespan)


@app.exception_handler(AutoNewsError)
async def autonews_error_handler(request: Request, exc: AutoNewsError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.code}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    body = await request.body()
    request_info = {
        "url": str(request.url),
        "method": request.method,
        "body": body.decode() if body else None,
        "query_params": dict(request.query_params)
    }

    try:
        # execute the request
        response = await call_next(request)

        if response.status_code >= 400:
            response_body = b""
            async for chunk in response.body_iterator:
                response_body += chunk

            logger.error(
                f"Request failed with status {response.status_code}\n"
                f"Request: {json.dumps(request_info, indent=2)}\n"
                f"Response: {response_body.decode()}\n"
            )
            return JSONResponse(
                content=json.loads(response_body),
                status_code=response.status_code,
                headers=dict(response.headers)
            )

        return response

    except Exception as e:
        logger.error(
            f"Request failed with exception\n"
            f"Request: {json.dumps(request_info, indent=2)}\n"
            f"Error: {str(e)}\n"
            f"Traceback: {traceback.format_exc()}"
        )
        raise

# register the API router
app.include_router(api_router, prefix="/api")
