# orange_market/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from orange_market.api.product import router as product_router
from orange_market.core.config import settings
from orange_market.core.errors import AuthenticationFailed, MarketError
from orange_market.core.products import ProductPipeline
from orange_market.core.tokens import TokenCodec
from orange_market.db.session import SessionLocal, create_tables, dispose

LOGGER = logging.getLogger(__name__)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === STARTUP ===
    await create_tables()
    app.state.token_codec = TokenCodec.from_settings(settings)
    app.state.sessions = SessionLocal
    app.state.products = ProductPipeline(SessionLocal)
    LOGGER.info("orange market started (db=%s)", settings.db_url)
    yield
    # === SHUTDOWN ===
    await dispose()


app = FastAPI(title="Orange Market", lifespan=lifespan)

app.include_router(product_router, prefix="/product", tags=["product"])


@app.exception_handler(MarketError)
async def market_error_handler(request: Request, exc: MarketError):
    headers = None
    if isinstance(exc, AuthenticationFailed):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


@app.get("/")
def root():
    return {"ok": True}
