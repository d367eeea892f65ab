"""
Pages Blueprint - Public portfolio page
Handles: Section rendering, contact form, uploaded files
"""

from flask import Blueprint

pages_bp = Blueprint('pages', __name__)

from . import routes
