"""
Process Package
===============

This package exposes the external attribute filter over HTTP for
authentication hosts running out of process.

Main Components:
----------------
- routes.py: FastAPI router with the /process endpoint

Usage:
------
    from enrichment.app.process.routes import process_router
    app.include_router(process_router)
"""

from .routes import process_router

__all__ = ["process_router"]
