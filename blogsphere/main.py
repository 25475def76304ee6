import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from blogsphere.core.config import settings
from blogsphere.core.logging import configure_logging, get_logger, set_request_id
from blogsphere.core.responses import register_exception_handlers, send_error
from blogsphere.db.session import create_db_and_tables

# Import models to ensure they are registered with SQLModel metadata
import blogsphere.models  # noqa: F401

configure_logging()
logger = get_logger("http")

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="Multi-tenant blogging platform API"
)

register_exception_handlers(app)

@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}. Visit /docs for Swagger UI."}

from blogsphere.routers import auth, users, blogs, posts, comments, subscriptions, folders, admin

prefix = settings.API_PREFIX
app.include_router(auth.router, prefix=prefix, tags=["auth"])
app.include_router(users.router, prefix=f"{prefix}/profile", tags=["profile"])
app.include_router(blogs.router, prefix=prefix, tags=["blogs"])
app.include_router(posts.router, prefix=prefix, tags=["posts"])
app.include_router(comments.router, prefix=prefix, tags=["comments"])
app.include_router(subscriptions.router, prefix=f"{prefix}/subscriptions", tags=["subscriptions"])
app.include_router(folders.router, prefix=f"{prefix}/folders", tags=["folders"])
app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["admin"])

# Local uploads are served the way post image_url values reference them
if settings.STORAGE_BACKEND == "local":
    app.mount(
        settings.STORAGE_URL_PREFIX,
        StaticFiles(directory=settings.STORAGE_ROOT, check_dir=False),
        name="storage",
    )


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    request_id = set_request_id(request.headers.get("x-request-id"))
    start_time = time.monotonic()

    try:
        response = await call_next(request)
    except Exception:
        # Unhandled errors still get an access line and the request id
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = send_error("Server Error.", status_code=500)

    elapsed_ms = (time.monotonic() - start_time) * 1000
    logger.info(
        "%s %s -> %s (%.1fms)",
        request.method, request.url.path, response.status_code, elapsed_ms
    )
    response.headers["X-Request-ID"] = request_id
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
