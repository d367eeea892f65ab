"""
Portfolio CMS - Main Application Entry Point
Application Factory Pattern with blueprints for the public page, sign-in
and the content dashboard.

This module initializes the Flask application with all necessary extensions,
configurations, and middleware. All actual route handling is delegated to blueprints.
"""

import os
import json
import logging
from datetime import datetime
import click
from flask import Flask, render_template, redirect, request, flash
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from config import get_config
from extensions import db, cache, login_manager
from utils.auth import AuthError, sign_up, get_session_context
from utils.data import StoreError, import_content
from utils.helpers import get_unread_messages_count, sanitize_about, format_date

# Import all blueprints
from blueprints.auth import auth_bp
from blueprints.pages import pages_bp
from blueprints.dashboard import dashboard_bp

ERROR_TITLES = {
    400: 'Bad Request',
    403: 'Forbidden',
    404: 'Page Not Found',
    405: 'Method Not Allowed',
    500: 'Server Error',
}


def create_app(config_name=None, overrides=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)
        overrides (dict): Settings applied on top of the configuration (optional)

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    conf = get_config(config_name)
    app.config.from_object(conf)
    if overrides:
        app.config.update(overrides)

    # Fix PostgreSQL URL if needed
    db_url = app.config.get('SQLALCHEMY_DATABASE_URI')
    if db_url and db_url.startswith("postgres://"):
        app.config['SQLALCHEMY_DATABASE_URI'] = db_url.replace(
            "postgres://", "postgresql://", 1)

    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize extensions with app
    initialize_extensions(app)

    # Register Jinja filters
    app.jinja_env.filters['sanitize_about'] = sanitize_about
    app.jinja_env.filters['format_date'] = format_date

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    # Register CLI commands
    register_commands(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'message': 'Portfolio CMS is running'}, 200

    return app


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    db.init_app(app)
    login_manager.init_app(app)
    cache.init_app(app)

    # Create tables if they don't exist
    with app.app_context():
        try:
            db.create_all()
            # Verify connection
            db.session.execute(text('SELECT 1'))
            app.logger.info("✓ Database initialized successfully")
        except SQLAlchemyError as e:
            app.logger.error(f"✗ Database initialization failed: {str(e)}")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(dashboard_bp)


def register_error_handlers(app):
    """Register custom error handlers"""

    def render_error(code, message=None):
        return render_template(
            'errors.html',
            code=code,
            title=ERROR_TITLES.get(code, 'Error'),
            message=message,
        ), code

    @app.errorhandler(400)
    def bad_request(e):
        return render_error(400, e.description)

    @app.errorhandler(403)
    def forbidden(e):
        return render_error(403)

    @app.errorhandler(404)
    def page_not_found(e):
        return render_error(404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return render_error(405)

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        return render_error(500)

    @app.errorhandler(413)
    def file_too_large(e):
        flash('File is too large. Maximum size is 16MB.', 'error')
        return redirect(request.url), 303


def register_hooks(app):
    """Register request/response hooks and context processors"""

    @app.context_processor
    def inject_global_vars():
        """Values every template can rely on"""
        session_ctx = get_session_context()
        return {
            'current_year': datetime.now().year,
            'current_admin': session_ctx['user'],
            'edit_session': session_ctx['edit_session'],
            'unread_messages': get_unread_messages_count() if session_ctx['edit_session'] else 0,
        }

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
            "font-src 'self' https://fonts.gstatic.com; "
            "img-src * data: blob:; "
            "frame-ancestors 'none';"
        )
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


def register_commands(app):
    """Register flask CLI commands"""

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
    def create_admin(email, password):
        """Create the admin account used to sign in to the dashboard."""
        try:
            user = sign_up(email, password)
        except AuthError as e:
            raise click.ClickException(e.message)
        click.echo(f"✓ Admin user {user.email} created")

    @app.cli.command('seed-content')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def seed_content(path):
        """Import portfolio content from a JSON export (table name -> rows)."""
        with open(path, 'r', encoding='utf-8') as f:
            try:
                payload = json.load(f)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"Invalid JSON: {e}")
        if not isinstance(payload, dict):
            raise click.ClickException("Expected a JSON object of table name -> rows")

        try:
            counts = import_content(payload)
        except StoreError as e:
            raise click.ClickException(e.message)
        for table, count in counts.items():
            click.echo(f"✓ {table}: {count}")


# Create app instance for gunicorn
app = create_app()

if __name__ == '__main__':
    # Get environment
    env = os.environ.get('FLASK_ENV', 'development')

    # Create app
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=(env == 'development')
    )
