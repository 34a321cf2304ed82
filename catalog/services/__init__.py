"""Books Catalog - Services Package

This package contains service modules for external integrations:
- HTTP client setup for the remote store
"""
