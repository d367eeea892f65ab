"""
Dashboard Blueprint - Admin content management
Handles: List, create, edit, delete and toggle for every content entity
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/admin')

from . import routes
