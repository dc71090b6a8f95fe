"""
Generic entity endpoints.

Most entities only need list, create, get and patch.  The classes here
are configured per route in ``erp.routers`` through ``as_view`` keyword
arguments, for example::

    EntityList.as_view(serializer_class=BedSerializer, filters={'status': 'available'})

URL keyword arguments other than ``pk`` are applied as ORM lookups, so
``beds/ward/<int:ward_id>`` lists the beds of one ward.  Entities with
side effects subclass these and route writes through ``erp.services``.
"""
from __future__ import annotations

from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import generics
from rest_framework.exceptions import ValidationError


class EntityQuerysetMixin:
    # ORM lookups applied to every request
    filters: dict = {}
    # camelCase query parameter -> ORM lookup
    query_filters: dict = {}
    ordering: tuple = ()
    # Result cap when no ?limit= is given (lists only)
    default_limit: Optional[int] = None

    def base_queryset(self):
        return self.get_serializer_class().Meta.model.objects.all()

    def get_queryset(self):
        lookups = dict(self.filters)
        for param, lookup in self.query_filters.items():
            value = self.request.query_params.get(param)
            if value not in (None, ''):
                lookups[lookup] = value
        lookups.update({k: v for k, v in self.kwargs.items() if k != 'pk'})

        try:
            qs = self.base_queryset().filter(**lookups)
        except (ValueError, DjangoValidationError) as exc:
            raise ValidationError({'query': [str(exc)]})
        if self.ordering:
            qs = qs.order_by(*self.ordering)
        return qs


class EntityList(EntityQuerysetMixin, generics.ListAPIView):
    def get_queryset(self):
        qs = super().get_queryset()
        limit = self.request.query_params.get('limit')
        if limit:
            try:
                limit = int(limit)
            except ValueError:
                raise ValidationError({'limit': ['A valid integer is required.']})
        else:
            limit = self.default_limit
        return qs[:limit] if limit else qs


class EntityListCreate(EntityList, generics.CreateAPIView):
    pass


class EntityDetail(EntityQuerysetMixin, generics.RetrieveUpdateAPIView):
    # PATCH only: updates are partial and validated per supplied field
    http_method_names = ['get', 'patch', 'head', 'options']


class EntityRetrieve(EntityQuerysetMixin, generics.RetrieveAPIView):
    pass
