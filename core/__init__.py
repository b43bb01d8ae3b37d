"""Core application for the BloodConnect backend.

This package contains models, serializers, services, views and route
registrations implementing the API consumed by the donor and hospital
front-end.
"""
