"""Shared utilities: logging setup, request metadata, datetime and id helpers.

Used by application, infrastructure and api layers. No business logic.
"""
