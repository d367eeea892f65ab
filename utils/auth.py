"""
Auth Module - Sign-up, sign-in and session state for the single admin user
"""

from flask import current_app
from flask_login import login_user, logout_user, current_user
from sqlalchemy.exc import SQLAlchemyError
from extensions import db, login_manager
from models import User
from .data import StoreError


class AuthError(StoreError):
    pass


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, user_id)


def sign_up(email, password):
    """Create an admin account; raises AuthError if the email is taken"""
    email = (email or '').strip().lower()
    if not email or not password:
        raise AuthError("Email and password are required")
    if User.query.filter_by(email=email).first():
        raise AuthError("User already registered")

    user = User(email=email)
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise AuthError(str(e)) from e
    current_app.logger.info(f"Created admin user {email}")
    return user


def sign_in(email, password, remember=False):
    """Start a session for valid credentials; raises AuthError otherwise"""
    email = (email or '').strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password or ''):
        raise AuthError("Invalid login credentials")
    if not user.is_active:
        raise AuthError("User account disabled")
    login_user(user, remember=remember)
    return user


def sign_out():
    logout_user()


def current_session():
    """The signed-in user, or None"""
    if current_user.is_authenticated:
        return current_user
    return None


def get_session_context():
    """Session state handed explicitly to templates"""
    user = current_session()
    return {
        'user': user,
        'edit_session': user is not None,
    }


__all__ = ['AuthError', 'sign_up', 'sign_in', 'sign_out', 'current_session', 'get_session_context']
