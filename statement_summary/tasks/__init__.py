"""Trigger adapters: storage events and Celery tasks."""
