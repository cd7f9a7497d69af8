from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pricing_engine.core.config import settings
from pricing_engine.core.logging_config import configure_logging

configure_logging()

app = FastAPI(
    title="Pricing Engine API",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import routers after app creation to avoid circular imports
from pricing_engine.api import pricing  # noqa: E402

app.include_router(pricing.router)


@app.get("/")
def root():
    return {"status": "ok", "service": "pricing-engine"}


@app.get("/api/health")
def health_check():
    return {
        "status": "healthy",
        "env": settings.ENV
    }
