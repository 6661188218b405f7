from fastapi import FastAPI
from shared.config.database import engine, Base
from shared.errors import register_error_handlers
from shared.observability import setup_observability
from shared.security import limiter
from .router import router, public_router
from .models import Order # Import to register with Base

order_app = FastAPI(title="Order Service", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(order_app, "order_service")
register_error_handlers(order_app)

# --- SECURITY SETUP ---
order_app.state.limiter = limiter

order_app.include_router(public_router)
order_app.include_router(router)

@order_app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
