import logging

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI

from atlas_notify import app_context
from atlas_notify.app.routes.billing import router as billing_router
from atlas_notify.app.routes.notify import router as notify_router
from atlas_notify.app.services.billing import (
    build_checkout_service,
    build_event_verifier,
    build_membership_service,
)
from atlas_notify.chat import create_notifier
from atlas_notify.config import load_app_config
from atlas_notify.database import create_pool, ensure_schema
from atlas_notify.middleware_logging import RequestLoggingMiddleware


load_dotenv()

logger = logging.getLogger("atlas_notify")

app = FastAPI(title="Atlas Notify")

app.add_middleware(RequestLoggingMiddleware)

app.include_router(billing_router)
app.include_router(notify_router)


@app.on_event("startup")
async def setup_services() -> None:
    config = load_app_config()
    logger.info("Connecting to PostgreSQL and verifying schema")
    pool = await create_pool(config)
    try:
        await ensure_schema(pool)
    except Exception:
        # Refuse to serve traffic against an unverified schema.
        await pool.close()
        raise

    http_client = httpx.AsyncClient()
    notifier = create_notifier(config, client=http_client)
    app_context.configure(
        app,
        config=config,
        notifier=notifier,
        membership_service=build_membership_service(pool, notifier, config),
        checkout_service=build_checkout_service(config),
        event_verifier=build_event_verifier(config),
        db_pool=pool,
        http_client=http_client,
    )
    logger.info("Atlas Notify ready", extra={**notifier.describe(), "port": config.port})


@app.on_event("shutdown")
async def teardown_services() -> None:
    http_client = getattr(app.state, "http_client", None)
    pool = getattr(app.state, "db_pool", None)

    if http_client is not None:
        await http_client.aclose()

    if pool is not None:
        await pool.close()


@app.get("/healthz")
def healthz():
    return {"ok": True}
