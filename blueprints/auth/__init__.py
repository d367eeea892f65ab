"""
Auth Blueprint - Authentication gate for the admin area
Handles: Login, Logout
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/admin')

from . import routes
