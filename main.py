import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import accounts
import cache
import cart
import database
import orders
import products
import sellers
from envelope import SUCCESS, install_exception_handlers, json_response

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

app.include_router(accounts.router)
app.include_router(sellers.router)
app.include_router(products.router)
app.include_router(cart.router)
app.include_router(orders.router)


@app.get("/")
def read_root():
    return {"message": "Storefront Backend Ready"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "cache": "✅ Connected" if cache.ping() else "❌ Not Available",
        "collections": []
    }
    try:
        if database.db is not None:
            response["database"] = "✅ Connected & Working"
            response["collections"] = database.db.list_collection_names()[:10]
    except Exception as e:
        logger.warning("Database check failed: %s", e)
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# Holiday sale flag
class HolidaySaleIn(BaseModel):
    enabled: bool


@app.get("/apps/holiday-sale")
def get_holiday_sale():
    return json_response(SUCCESS, "Holiday sale status fetched successfully.", data={"enabled": cache.is_holiday_sale_enabled()})


@app.post("/apps/holiday-sale")
def set_holiday_sale(payload: HolidaySaleIn):
    if not cache.set_holiday_sale_enabled(payload.enabled):
        raise HTTPException(status_code=500, detail="Cache not configured")
    logger.info("Holiday sale enabled set to %s", payload.enabled)
    return json_response(SUCCESS, "Holiday sale status updated successfully.", data={"enabled": payload.enabled})


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
