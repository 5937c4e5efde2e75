# Celery instance is defined in sme_erp/celery.py
# celery_app becomes the singleton task queue app for the whole project
from .celery import celery_app

__all__ = ("celery_app",)

""" Run workers with "celery -A sme_erp worker -l info":
    -A sme_erp imports sme_erp/__init__.py, which exposes celery_app. """
