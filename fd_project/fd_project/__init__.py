# Celery instance is defined in fd_project/celery.py
from .celery import celery_app

__all__ = ("celery_app",)

""" Workers are started with "celery -A fd_project worker -l info",
    which imports this module and finds celery_app. """
