"""
Auth Routes - Sign-in and sign-out for the admin area
"""

from flask import render_template, redirect, url_for, request, flash
from utils.auth import AuthError, sign_in, sign_out, current_session
from utils.decorators import anonymous_required
from utils.security import log_ip_activity, safe_next
from . import auth_bp


@auth_bp.route('', methods=['GET', 'POST'])
@anonymous_required
def login():
    """Admin login"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')

        try:
            sign_in(email, password, remember=bool(request.form.get('remember')))
        except AuthError as e:
            log_ip_activity('failed_login', f"email={email}")
            flash(e.message, 'error')
            return render_template('admin/login.html', email=email), 401

        log_ip_activity('admin_login', f"email={email}")
        flash('Signed in. Edit mode is on.', 'success')
        return redirect(safe_next(request.args.get('next')) or url_for('pages.index'))

    return render_template('admin/login.html', email='')


@auth_bp.route('/logout')
def logout():
    """Logout current user"""
    if current_session() is None:
        flash('Please login to access this page.', 'error')
        return redirect(url_for('auth.login'))

    sign_out()
    flash('Logged out successfully', 'success')
    return redirect(url_for('pages.index'))
