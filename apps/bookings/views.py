"""API views for the booking domain.

Write endpoints dispatch commands through the message bus; reads go to
`apps.bookings.services`.
"""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import HasMarketplaceRole, IsVenue
from shared.application.message_bus import message_bus

from . import services
from .application.command_handlers import (
    AcceptOfferCommand,
    BookInstantGigCommand,
    CancelBookingCommand,
    CompleteBookingCommand,
    CounterOfferCommand,
    DeclineOfferCommand,
    PostInstantGigCommand,
    ReportNoShowCommand,
    SendOfferCommand,
    WithdrawInstantGigCommand,
    WithdrawOfferCommand,
)
from .models import Offer
from .serializers import (
    BookingSerializer,
    CancelBookingSerializer,
    InstantGigCreateSerializer,
    InstantGigSerializer,
    OfferSerializer,
    OfferTermsSerializer,
    SendOfferSerializer,
)


class OfferViewSet(viewsets.GenericViewSet):
    """Offers inside the caller's conversations."""

    serializer_class = OfferSerializer
    permission_classes = [permissions.IsAuthenticated, HasMarketplaceRole]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = Offer.objects.select_related("conversation", "from_user").filter(
            Q(conversation__artist=user) | Q(conversation__venue=user)
        )
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs.order_by("-created_at")

    def list(self, request):  # type: ignore
        page = self.paginate_queryset(self.get_queryset())
        serializer = OfferSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):  # type: ignore
        return Response(OfferSerializer(self.get_object()).data)

    def create(self, request):  # type: ignore
        serializer = SendOfferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = message_bus.handle_command(
            SendOfferCommand(
                conversation_id=serializer.validated_data["conversation_id"],
                user_id=request.user.pk,
                terms=serializer.to_terms(),
            )
        )
        return Response(OfferSerializer(offer).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(AcceptOfferCommand(offer_id=int(pk), user_id=request.user.pk))
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def decline(self, request, pk=None):  # type: ignore
        offer = message_bus.handle_command(DeclineOfferCommand(offer_id=int(pk), user_id=request.user.pk))
        return Response(OfferSerializer(offer).data)

    @action(detail=True, methods=["post"])
    def counter(self, request, pk=None):  # type: ignore
        serializer = OfferTermsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        counter = message_bus.handle_command(
            CounterOfferCommand(offer_id=int(pk), user_id=request.user.pk, terms=serializer.to_terms())
        )
        return Response(OfferSerializer(counter).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def withdraw(self, request, pk=None):  # type: ignore
        offer = message_bus.handle_command(WithdrawOfferCommand(offer_id=int(pk), user_id=request.user.pk))
        return Response(OfferSerializer(offer).data)


class InstantGigViewSet(viewsets.GenericViewSet):
    """The instant gig board."""

    serializer_class = InstantGigSerializer
    permission_classes = [permissions.IsAuthenticated, HasMarketplaceRole]

    def get_queryset(self):  # type: ignore
        return services.get_instant_gigs(self.request.user, self.request.query_params.get("city"))

    def list(self, request):  # type: ignore
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(InstantGigSerializer(page, many=True).data)

    def create(self, request):  # type: ignore
        serializer = InstantGigCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        gig = message_bus.handle_command(PostInstantGigCommand(user_id=request.user.pk, **serializer.validated_data))
        return Response(InstantGigSerializer(gig).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def mine(self, request):  # type: ignore
        gigs = request.user.instant_gigs.order_by("-date", "-created_at")
        page = self.paginate_queryset(gigs)
        return self.get_paginated_response(InstantGigSerializer(page, many=True).data)

    @action(detail=True, methods=["post"])
    def book(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(BookInstantGigCommand(gig_id=int(pk), user_id=request.user.pk))
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def withdraw(self, request, pk=None):  # type: ignore
        gig = message_bus.handle_command(WithdrawInstantGigCommand(gig_id=int(pk), user_id=request.user.pk))
        return Response(InstantGigSerializer(gig).data)


class BookingViewSet(viewsets.GenericViewSet):
    """The caller's bookings and the booking lifecycle actions."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, HasMarketplaceRole]
    # Mounted at the router root next to offers/ and instant-gigs/
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        return services.get_user_bookings(self.request.user, self.request.query_params.get("scope"))

    def list(self, request):  # type: ignore
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(BookingSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = services.get_booking_details(int(pk), request.user)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            CancelBookingCommand(
                booking_id=int(pk),
                user_id=request.user.pk,
                reason=serializer.validated_data["reason"],
            )
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], url_path="no-show", permission_classes=[permissions.IsAuthenticated, IsVenue])
    def no_show(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(ReportNoShowCommand(booking_id=int(pk), user_id=request.user.pk))
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(CompleteBookingCommand(booking_id=int(pk), user_id=request.user.pk))
        return Response(BookingSerializer(booking).data)
