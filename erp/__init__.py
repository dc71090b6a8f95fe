"""Hospital ERP application.

This package holds the models, serializers, domain services, views and
route registrations behind the ``/api`` surface consumed by the
front-end application.
"""
