# rfidcart/main.py
from fastapi import FastAPI
from rfidcart.data.database import Base, init_db
from rfidcart.api.routers import health, carts, products, transactions
from rfidcart.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="RFID Cart Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(products.router)
    app.include_router(transactions.router)

    return app


try:
    init_db()
    logger.info(f"Database ready, tables: {list(Base.metadata.tables.keys())}")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
