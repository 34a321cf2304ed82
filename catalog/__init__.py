"""Books Catalog - Core Application Package

This package contains the core modules:
- Book record model (book.py)
- Remote store gateway (gateway.py)
- View/state controller (library.py)
- HTTP client setup (services/http_client.py)
"""
