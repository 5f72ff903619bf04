"""
ERP Prime – FastAPI application entry point.

Run with:
    uvicorn erp.main:app --reload --host 0.0.0.0 --port 8000
or, using API_HOST / API_PORT from the environment:
    python -m erp.main
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlmodel import Session

from erp.api.routes import router
from erp.api.report_routes import report_router
from erp.core.config import settings
from erp.core.database import create_db_and_tables, engine
from erp.core.logging import setup_logging
from erp.seed import seed_accounts


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown hooks."""
    setup_logging()
    logger.info("Starting ERP Prime backend …")
    create_db_and_tables()
    logger.info("Database tables ready")
    if settings.SEED_ON_STARTUP:
        with Session(engine) as session:
            seed_accounts(session)
    yield
    logger.info("ERP Prime backend shut down")


app = FastAPI(
    title="ERP Prime API",
    description="Vouchers, double-entry ledgers and GST/P&L reporting",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS – allow frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(report_router)


@app.get("/")
def root():
    return {"message": "ERP Prime API", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("erp.main:app", host=settings.API_HOST, port=settings.API_PORT)
