"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BookingViewSet, InstantGigViewSet, OfferViewSet

router = DefaultRouter()
router.register(r"offers", OfferViewSet, basename="offer")
router.register(r"instant-gigs", InstantGigViewSet, basename="instant-gig")
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
]
