"""Rhodium HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives platform webhooks and serves compliance
status.

Usage
-----
Create and run the application::

    from rhodium.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # webhook and compliance endpoints

"""

from rhodium.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
