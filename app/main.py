# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.api.routes import auth_routes, journal_routes, root_routes
from app.core.config import settings
from app.core.exceptions import LoginRequired, login_required_handler
from app.core.startup import shutdown_event, startup_event

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Noticing")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

app.add_exception_handler(LoginRequired, login_required_handler)

app.include_router(root_routes.router)
app.include_router(auth_routes.router, prefix="/api/auth")
app.include_router(journal_routes.router, prefix="/api/journal")

@app.on_event("startup")
async def app_startup():
    await startup_event(app)

@app.on_event("shutdown")
async def app_shutdown():
    await shutdown_event(app)
