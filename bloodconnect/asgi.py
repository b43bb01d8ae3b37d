"""
ASGI config for the BloodConnect project.

It exposes the ASGI callable as a module-level variable named ``application``.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "bloodconnect.settings")

application = get_asgi_application()
