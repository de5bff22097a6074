from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from hospital_directory.controllers.controller import router
from hospital_directory.core.config import settings
from hospital_directory.services.field_aliases import SCHEMA_VERSION
import logging
import time

# Configure logging with detailed format
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Read-only hospital directory with reference enrichment and faceted search",
    version=settings.app_version
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    logger.info(f"🌐 {request.method} {request.url.path} - params: {dict(request.query_params)}")
    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"💥 {request.method} {request.url.path} failed after {process_time:.2f}ms: {e}", exc_info=True)
        raise

    process_time = (time.time() - start_time) * 1000
    logger.info(f"✅ {request.method} {request.url.path} -> {response.status_code} in {process_time:.2f}ms")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    logger.info("🚀" + "=" * 79)
    logger.info(f"🚀 {app.title.upper()} - STARTING UP")
    logger.info(f"📝 Version: {app.version}")
    logger.info(f"📝 Field alias schema: {SCHEMA_VERSION}")
    logger.info(f"📝 Cache TTL: {settings.cache_ttl_seconds}s, fetch timeout: {settings.fetch_timeout_seconds}s")
    for route in app.routes:
        if hasattr(route, 'methods'):
            methods = ', '.join(sorted(route.methods))
            logger.info(f"   {methods:8} {route.path}")
    logger.info("🚀" + "=" * 79)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"🛑 {app.title.upper()} - SHUTTING DOWN")


app.include_router(router)
