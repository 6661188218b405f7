from fastapi import FastAPI
from shared.config.database import engine, Base

# IMPORTANT: import models so they register with Base
from services.catalog_service import models as catalog_models
from services.account_service import models as account_models
from services.order_service import models as order_models

from services.catalog_service.main import catalog_app
from services.account_service.main import account_app
from services.order_service.main import order_app

app = FastAPI(title="Book Heaven")

@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

app.mount("/books", catalog_app)
app.mount("/accounts", account_app)
app.mount("/orders", order_app)
