"""FastAPI and Socket.IO adapter for a browser front-end."""

from .server import create_app, create_asgi_app

__all__ = ['create_app', 'create_asgi_app']
