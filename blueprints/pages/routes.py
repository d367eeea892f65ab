"""
Pages Routes - Public portfolio page
"""

import os
from flask import render_template, redirect, url_for, request, flash, send_from_directory, current_app, abort
from utils.entities import ENTITIES
from utils.data import StoreError, fetch_rows, fetch_single, insert_row
from utils.forms import FormError, parse_form
from utils.auth import get_session_context
from utils.helpers import group_skills
from utils.security import check_rate_limit
from utils.notifications import notify_new_message
from utils.storage import BUCKETS, bucket_path
from . import pages_bp

CONTACT_FIELDS = ('name', 'email', 'subject', 'message')
EMPTY_CONTACT_FORM = {name: '' for name in CONTACT_FIELDS}


def load_sections():
    """Read every public section; each one queries its own table"""
    testimonials = ENTITIES['testimonials']
    return {
        'hero': fetch_single(ENTITIES['hero']),
        'about': fetch_single(ENTITIES['about']),
        'skill_groups': group_skills(fetch_rows(ENTITIES['skills'])),
        'projects': fetch_rows(ENTITIES['projects']),
        'experience': fetch_rows(ENTITIES['experience']),
        'education': fetch_rows(ENTITIES['education']),
        'achievements': fetch_rows(ENTITIES['achievements']),
        'content': fetch_rows(ENTITIES['content']),
        'testimonials': fetch_rows(testimonials, **testimonials.public_filters),
        'contact': fetch_single(ENTITIES['contact-info']),
    }


def render_portfolio(contact_form=None, status=200):
    session_ctx = get_session_context()
    return render_template(
        'portfolio.html',
        sections=load_sections(),
        contact_form=contact_form or EMPTY_CONTACT_FORM,
        edit_session=session_ctx['edit_session'],
    ), status


@pages_bp.route('/')
def index():
    """Public portfolio page"""
    return render_portfolio()


@pages_bp.route('/contact', methods=['POST'])
def contact():
    """Public contact form - stores the message for the admin"""
    submitted = {name: request.form.get(name, '').strip() for name in CONTACT_FIELDS}

    if not check_rate_limit('contact'):
        flash('Too many messages. Please try again in a minute.', 'error')
        return render_portfolio(submitted, 429)

    try:
        values = parse_form(ENTITIES['messages'], request.form, only=CONTACT_FIELDS)
    except FormError as e:
        flash(str(e), 'error')
        return render_portfolio(submitted, 400)

    values['message'] = values['message'][:5000]
    try:
        message = insert_row(ENTITIES['messages'], values)
    except StoreError as e:
        flash(f'Error sending message: {e.message}', 'error')
        return render_portfolio(submitted, 500)

    notify_new_message(message)
    flash('Thank you! Your message has been sent.', 'success')
    return redirect(url_for('pages.index', _anchor='contact'))


@pages_bp.route('/uploads/<bucket>/<path:filename>')
def uploaded_file(bucket, filename):
    """Serve a file from a public storage bucket"""
    if bucket not in BUCKETS:
        abort(404)
    folder = bucket_path(bucket)
    if not os.path.isdir(folder):
        abort(404)
    return send_from_directory(folder, filename)


@pages_bp.route('/robots.txt')
def robots():
    """Generate robots.txt"""
    robots_txt = "User-agent: *\nAllow: /\nDisallow: /admin\n"
    response = current_app.make_response(robots_txt)
    response.headers['Content-Type'] = 'text/plain; charset=utf-8'
    return response
