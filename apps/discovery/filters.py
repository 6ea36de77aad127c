"""FilterSet definitions for the match list."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Match


class MatchFilterSet(django_filters.FilterSet):
    """Filters for the caller's matches."""

    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    min_score = django_filters.NumberFilter(field_name="score", lookup_expr="gte")
    city = django_filters.CharFilter(method="filter_city")

    class Meta:
        model = Match
        fields = ["date_from", "date_to", "min_score"]

    def filter_city(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(venue__venue_profile__city__icontains=value.strip())
