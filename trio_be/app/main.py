from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from datetime import timedelta
from app.config import get_settings
from app.routers import products
from app.routers import orders
from app.routers import cart
from app.routers import admin_dashboard
from app.services.cart_storage import prune_cart_sessions
from app.services.documents import BackendError
from app.utils.security import get_admin_gate, warn_admin_gate
from app.utils.storage import MEDIA_ROOT, StorageError

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Trio Collection API")


@app.on_event("startup")
def on_startup():
    # Ensure all DB tables exist after all models are imported
    from app.models.database import SessionLocal, init_db
    init_db()
    db = SessionLocal()
    try:
        removed = prune_cart_sessions(db, timedelta(days=get_settings().CART_SESSION_DAYS))
        if removed:
            logger.info("Pruned %d expired cart session rows", removed)
    except BackendError:
        logger.exception("Cart session pruning failed")
    finally:
        db.close()
    warn_admin_gate(get_admin_gate())


@app.exception_handler(BackendError)
def backend_error_handler(request: Request, exc: BackendError):
    logger.error("Backend call failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong. Please try again."})


@app.exception_handler(StorageError)
def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage call failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Upload failed. Please try again."})


# Ensure media directory exists before mounting
MEDIA_ROOT.mkdir(parents=True, exist_ok=True)

# Serve uploaded media files
app.mount("/media", StaticFiles(directory=str(MEDIA_ROOT)), name="media")

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[cart.CART_COUNT_HEADER],
)

# Include routers
app.include_router(products.home_router, prefix="/api", tags=["home"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
app.include_router(orders.router, prefix="/api", tags=["orders"])
app.include_router(admin_dashboard.router, prefix="/api/admin", tags=["admin"])
app.include_router(orders.admin_router, prefix="/api/admin/orders", tags=["admin-orders"])


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().PORT, reload=False)
