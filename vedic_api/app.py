import logging
import os
from dotenv import load_dotenv

# .env is optional; real environment variables win.
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routers import panchang as panchang_router
from .routers import calculators as calculators_router
from .middleware.logging import LoggingMiddleware
from .services.cache import ResponseCache
from .services.ephem import ENGINE_VERSION, init_paths


logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

init_paths(os.getenv("SE_EPHE_PATH"))

app = FastAPI(title="vedic-panchang", version="0.1.0")

# Localhost origins in development, the configured list elsewhere.
app_env = (os.getenv("APP_ENV") or "dev").lower()
if app_env in {"dev", "development"}:
    origin_rules = {"allow_origin_regex": r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"}
else:
    origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
    if os.getenv("PREVIEW_ORIGIN"):
        origins.append(os.environ["PREVIEW_ORIGIN"])
    origin_rules = {"allow_origins": origins}

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
    **origin_rules,
)

app.add_middleware(LoggingMiddleware)

app.state.panchang_cache = ResponseCache.from_env()

app.include_router(panchang_router.router)
app.include_router(calculators_router.router)


@app.get("/__health")
def health():
    return {"ok": True, "engine": ENGINE_VERSION}


@app.get("/")
def root():
    return {"message": "vedic-panchang API is running. See /__health and /docs."}
