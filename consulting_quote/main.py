from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import contact, quotes, questionnaire

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("consulting_quote")

app = FastAPI(
    title="Business Health Check Quotes",
    description=f"Monthly accounting fee quotes for {settings.COMPANY_NAME}",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(quotes.router, prefix="/api")
app.include_router(questionnaire.router, prefix="/api")
app.include_router(contact.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "consulting-quote"}


@app.on_event("startup")
def load_pricing():
    """Load pricing tables at startup so a bad pricing file fails the deploy, not a request."""
    from .calculators.pricing_tables import get_pricing_tables
    tables = get_pricing_tables()
    logger.info(
        "Pricing tables version %s active (%d entity types, minimum %s%d)",
        tables.version, len(tables.base_services), settings.CURRENCY_SYMBOL, tables.minimum_quote,
    )
