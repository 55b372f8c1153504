"""Mini README: Interactive interfaces for Money Check.

Exports the FastAPI application factory that serves the ledger to a browser
front end. The command-line entry point lives in ``main_money_check.py``.
"""

from .web_app import create_application

__all__ = ["create_application"]
