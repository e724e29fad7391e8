"""Versioned API router."""

from fastapi import APIRouter

from . import (
    auth,
    availability,
    blocked_dates,
    bookings,
    contact_messages,
    dossier,
    health,
    pricing_rules,
    settings,
    storage,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(availability.router)
router.include_router(bookings.router)
router.include_router(dossier.router)
router.include_router(blocked_dates.router)
router.include_router(pricing_rules.router)
router.include_router(settings.router)
router.include_router(contact_messages.router)
router.include_router(storage.router)
