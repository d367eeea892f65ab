"""
Extensions Module - Flask extensions shared by the app factory and blueprints
Kept out of app.py so models and utils can import them without cycles.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_caching import Cache

db = SQLAlchemy()

# Entity query cache; backend and timeout come from the CACHE_* settings
cache = Cache()

# Single admin account; the dashboard gate lives in utils.decorators
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please login to access this page.'
login_manager.login_message_category = 'error'
login_manager.session_protection = 'strong'

__all__ = ['db', 'cache', 'login_manager']
