"""Mini README: Outer interfaces for the FLOYM ledger.

Exports the FastAPI application factory serving the ledger as JSON. HTML
views and print layouts are left to whichever front end consumes the API.
"""

from .web_app import create_application

__all__ = ["create_application"]
