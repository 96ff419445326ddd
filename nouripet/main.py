"""
NouriPet Plan API - Main Application

Nutrition and pricing core of a fresh dog food subscription: energy
requirements, portions, recipe recommendations and plan pricing.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nouripet.core.config import settings
from nouripet.core.database import Base, engine
from nouripet.core.exceptions import UnknownRecipeError
from nouripet.core.log import configure_logging
from nouripet.api import dogs, recipes, pricing, plans, logs

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## NouriPet Plan API

    Portion and price fresh-food plans for dogs.

    ### Features
    - Energy requirements (RER/DER) by life stage, activity and body condition
    - Daily and per-meal grams for any recipe mix
    - Recipe recommendations with reasoning and confidence
    - Stripe price table lookup with per-100g fallback pricing
    - Topper pricing and log-driven follow-up insights

    ### Core Endpoints
    - `/dog` - Manage dog profiles
    - `/recipe` - Recipe catalog
    - `/pricing` - Quotes, toppers and size tiers
    - `/plan/compute` - Calculate complete feeding plans
    - `/log` - Weight and stool logs
    """,
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnknownRecipeError)
def unknown_recipe_handler(request: Request, exc: UnknownRecipeError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValueError)
def value_error_handler(request: Request, exc: ValueError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Include routers
app.include_router(dogs.router)
app.include_router(recipes.router)
app.include_router(pricing.router)
app.include_router(plans.router)
app.include_router(logs.router)


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "stripe_mode": settings.stripe_mode,
        "endpoints": {
            "dogs": "/dog",
            "recipes": "/recipe",
            "pricing": "/pricing",
            "plans": "/plan",
            "logs": "/log",
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
