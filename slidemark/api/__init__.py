# Slidemark API

from .main import app, create_app
from .config import get_settings, Settings
from .routes import api_router

__all__ = [
    'app',
    'create_app',
    'get_settings',
    'Settings',
    'api_router',
]
