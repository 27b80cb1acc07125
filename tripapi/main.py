from datetime import datetime, timezone
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tripapi.middleware.error_handler import setup_error_handlers
from tripapi.middleware.request_id import RequestIDMiddleware
from tripapi.routers import matrix_router, poi_router, route_router

API_VERSION = "0.1.0"

logger = logging.getLogger("tripapi.main")

app = FastAPI(
    title="Trip Planner Geo API",
    description="Routing, distance matrices and POI search for trip planning",
    version=API_VERSION,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and timing."""
    start_time = time.time()
    path = request.url.path
    method = request.method

    # Health checks are polled, skip them
    skip_logging = method == "GET" and path == "/health"

    if not skip_logging:
        logger.info(f"🔔 {method} {path}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"💥 {method} {path} - Exception: {e} - {process_time:.4f}s")
        raise

    process_time = time.time() - start_time
    status_code = response.status_code

    if status_code < 400:
        status_str = f"✅ {status_code}"
    elif status_code < 500:
        status_str = f"⚠️ {status_code}"
    else:
        status_str = f"❌ {status_code}"

    if not skip_logging:
        logger.info(f"🏁 {method} {path} - {status_str} - {process_time:.3f}s")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Added last so it runs first and the request id is set for every log line
app.add_middleware(RequestIDMiddleware)

setup_error_handlers(app)

app.include_router(route_router.router)
app.include_router(matrix_router.router)
app.include_router(poi_router.router)


@app.get("/")
async def root():
    return {"message": "Welcome to the Trip Planner Geo API"}


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
    }
