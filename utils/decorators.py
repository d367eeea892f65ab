"""
Decorators Module - Authentication gate for admin views
"""

from functools import wraps
from flask import redirect, url_for, flash, request
from flask_login import current_user


def login_required(f):
    """Decorator to require a signed-in admin"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            flash('Please login to access this page.', 'error')
            return redirect(url_for('auth.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def anonymous_required(f):
    """Decorator to send already signed-in visitors away from auth pages"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_user.is_authenticated:
            return redirect(url_for('pages.index'))
        return f(*args, **kwargs)
    return decorated_function
