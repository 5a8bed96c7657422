"""API v1 module."""

from fastapi import APIRouter

from walletauth.api.v1.endpoints import auth, metamask

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router)

# Wallet login routes are served outside the versioned prefix
metamask_router = metamask.router
