"""
Shared serializer plumbing.

The front-end speaks camelCase JSON while the models use snake_case
column names.  :class:`CamelModelSerializer` translates in both
directions so the per-entity serializers can stay plain
``ModelSerializer`` declarations:

* incoming keys are accepted in either camelCase or snake_case;
* outgoing keys and validation error keys are camelCase;
* foreign keys are exposed as ``<name>Id`` (``patient`` -> ``patientId``)
  except user references named ``*_by`` (``requestedBy``, ``orderedBy``).
"""
from __future__ import annotations

import re
from collections.abc import Mapping

import bleach
from rest_framework import serializers

_SNAKE_PART = re.compile(r'_([a-z0-9])')
_CAMEL_HUMP = re.compile(r'(?<=[a-z0-9])([A-Z])')


def camelize(name: str) -> str:
    return _SNAKE_PART.sub(lambda m: m.group(1).upper(), name)


def underscore(name: str) -> str:
    return _CAMEL_HUMP.sub(lambda m: '_' + m.group(1).lower(), name)


def clean_text(value: str) -> str:
    """Strip markup from free text typed by users."""
    return bleach.clean((value or '').strip(), tags=[], strip=True)


def _camelize_errors(detail):
    if isinstance(detail, Mapping):
        return {camelize(k): v for k, v in detail.items()}
    return detail


class CamelModelSerializer(serializers.ModelSerializer):
    # Model field names whose values go through clean_text()
    sanitized_fields: tuple[str, ...] = ()

    def get_fields(self):
        fields = super().get_fields()
        renamed = {}
        for name, field in fields.items():
            if isinstance(field, serializers.PrimaryKeyRelatedField) and not name.endswith(('_id', '_by')):
                field.source = name
                renamed[f'{name}_id'] = field
            else:
                renamed[name] = field
        return renamed

    def run_validation(self, data=serializers.empty):
        if isinstance(data, Mapping):
            data = {underscore(k): v for k, v in data.items()}
        try:
            return super().run_validation(data)
        except serializers.ValidationError as exc:
            raise serializers.ValidationError(_camelize_errors(exc.detail))

    def to_internal_value(self, data):
        attrs = super().to_internal_value(data)
        for name in self.sanitized_fields:
            if attrs.get(name):
                attrs[name] = clean_text(attrs[name])
        return attrs

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {camelize(k): v for k, v in data.items()}
