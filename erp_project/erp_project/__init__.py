# Celery instance is defined in erp_project/celery.py
# celery_app is the single task queue app of the project
from .celery import celery_app

# 'from erp_project import *', only exports celery_app
__all__ = ("celery_app",)
