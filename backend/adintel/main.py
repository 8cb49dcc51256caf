"""
Ad Intelligence — FastAPI Backend
Analyzes a competitor brand's Facebook/Instagram ad creatives and records the
resulting intelligence in a knowledge-graph store.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from adintel.config import get_settings
from adintel.database import init_db, check_db_connection
from adintel.routers import analysis, intelligence

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Ad Intelligence service...")
    if settings.intelligence_store_backend == "database":
        try:
            await init_db()
            logger.info("Database initialized — all tables ready.")
        except Exception as e:
            logger.error(f"Startup failed (DB/init): {e}", exc_info=True)
            # Still yield so app can serve /api/health (degraded) and analyses (recording degrades)
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Ad Intelligence",
    description="Competitor ad creative analysis: breakdown, insights, opportunities, score and spend estimate",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Register Routers ─────────────────────────────────────────────────
app.include_router(analysis.router, prefix="/api", tags=["Ad Analysis"])
app.include_router(intelligence.router, prefix="/api", tags=["Intelligence Store"])


@app.get("/api/health")
async def health_check():
    if settings.intelligence_store_backend == "database":
        db_ok = await check_db_connection()
        database = "connected" if db_ok else "disconnected"
    else:
        # Entities live elsewhere; the DB is not on any request path
        db_ok = True
        database = "unused"
    return {
        "status": "healthy" if db_ok else "degraded",
        "service": "Ad Intelligence",
        "database": database,
        "creative_source": "configured" if settings.puppeteer_mcp_url else "synthetic",
        "intelligence_store": settings.intelligence_store_backend,
    }
