"""
Dashboard Routes - Generic content management for every entity

One set of views serves all entities; what differs between them (fields,
ordering, singleton-ness, toggles) comes from utils.entities.
"""

from flask import render_template, redirect, url_for, request, flash, abort
from utils.decorators import login_required
from utils.entities import ENTITIES
from utils.data import (
    StoreError, RowNotFound, fetch_rows, fetch_row, fetch_single,
    insert_row, update_row, delete_row, toggle_field, save_single
)
from utils.forms import FormError, parse_form, form_values, submitted_values
from utils.storage import StorageError, upload_file
from utils.helpers import get_unread_messages_count
from utils.security import safe_next
from . import dashboard_bp


def get_entity_or_404(key):
    entity = ENTITIES.get(key)
    if entity is None:
        abort(404)
    return entity


def apply_uploads(entity, values):
    """Replace URL fields with freshly uploaded files, when one was chosen"""
    for field in entity.upload_fields():
        file = request.files.get(f'{field.name}_file')
        if file and file.filename:
            values[field.name] = upload_file(field.bucket, file)
    return values


def render_form(entity, values, row_id=None, status=200):
    if entity.singleton:
        action = url_for('dashboard.entity_index', key=entity.key)
    elif row_id:
        action = url_for('dashboard.edit_entity', key=entity.key, row_id=row_id)
    else:
        action = url_for('dashboard.new_entity', key=entity.key)
    return render_template(
        'admin/entity_form.html',
        entity=entity,
        values=values,
        row_id=row_id,
        action=action,
    ), status


def submit_form(entity, row_id=None):
    """
    Validate, upload and store one submitted entity form

    On success the admin is sent back to the list (or the singleton form).
    On failure the form is rendered again with everything that was typed.
    """
    if entity.singleton or row_id:
        gerund, past = 'updating', 'updated'
    else:
        gerund, past = 'adding', 'added'

    try:
        values = parse_form(entity, request.form)
    except FormError as e:
        flash(f'Error {gerund} {entity.label.lower()}: {e}', 'error')
        return render_form(entity, submitted_values(entity, request.form), row_id, 400)

    try:
        apply_uploads(entity, values)
    except StorageError as e:
        flash(f'Error uploading file: {e.message}', 'error')
        return render_form(entity, submitted_values(entity, request.form), row_id, 400)

    try:
        if entity.singleton:
            save_single(entity, values)
        elif row_id:
            update_row(entity, row_id, values)
        else:
            insert_row(entity, values)
    except RowNotFound as e:
        flash(f'Error {gerund} {entity.label.lower()}: {e.message}', 'error')
        return redirect(url_for('dashboard.entity_index', key=entity.key))
    except StoreError as e:
        flash(f'Error {gerund} {entity.label.lower()}: {e.message}', 'error')
        return render_form(entity, submitted_values(entity, request.form), row_id, 500)

    flash(f'{entity.label} {past} successfully!', 'success')
    return redirect(url_for('dashboard.entity_index', key=entity.key))


@dashboard_bp.route('/dashboard')
@login_required
def index():
    """Admin dashboard with one tile per entity"""
    return render_template(
        'admin/dashboard.html',
        entities=list(ENTITIES.values()),
        unread_count=get_unread_messages_count(),
    )


@dashboard_bp.route('/<key>', methods=['GET', 'POST'])
@login_required
def entity_index(key):
    """List rows of an entity, or edit it directly when it is a singleton"""
    entity = get_entity_or_404(key)

    if entity.singleton:
        if request.method == 'POST':
            return submit_form(entity)
        return render_form(entity, form_values(entity, fetch_single(entity)))

    if request.method == 'POST':
        abort(405)

    try:
        rows = fetch_rows(entity)
    except StoreError as e:
        flash(f'Error loading {entity.plural.lower()}: {e.message}', 'error')
        rows = []
    template = 'admin/messages.html' if entity.key == 'messages' else 'admin/entity_list.html'
    return render_template(template, entity=entity, rows=rows)


@dashboard_bp.route('/<key>/new', methods=['GET', 'POST'])
@login_required
def new_entity(key):
    """Create a row"""
    entity = get_entity_or_404(key)
    if entity.singleton or not entity.creatable:
        abort(404)

    if request.method == 'POST':
        return submit_form(entity)
    return render_form(entity, form_values(entity))


@dashboard_bp.route('/<key>/<row_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_entity(key, row_id):
    """Edit a row; the form is pre-filled from the stored row"""
    entity = get_entity_or_404(key)
    if entity.singleton or not entity.creatable:
        abort(404)

    if request.method == 'POST':
        return submit_form(entity, row_id)

    row = fetch_row(entity, row_id)
    if row is None:
        abort(404)
    return render_form(entity, form_values(entity, row), row_id)


@dashboard_bp.route('/<key>/<row_id>/delete', methods=['POST'])
@login_required
def delete_entity(key, row_id):
    """Delete a row; the browser asks for confirmation first"""
    entity = get_entity_or_404(key)
    if entity.singleton:
        abort(404)

    try:
        delete_row(entity, row_id)
    except StoreError as e:
        flash(f'Error deleting {entity.label.lower()}: {e.message}', 'error')
    else:
        flash(f'{entity.label} deleted successfully!', 'success')
    return redirect(url_for('dashboard.entity_index', key=entity.key))


@dashboard_bp.route('/<key>/<row_id>/toggle/<field>', methods=['POST'])
@login_required
def toggle_entity(key, row_id, field):
    """Flip one boolean field, e.g. testimonial visibility"""
    entity = get_entity_or_404(key)
    if field not in entity.toggles:
        abort(404)

    try:
        toggle_field(entity, row_id, field)
    except StoreError as e:
        flash(f'Error updating {entity.label.lower()}: {e.message}', 'error')
    else:
        flash(f'{entity.label} updated successfully!', 'success')
    return redirect(safe_next(request.form.get('next')) or url_for('dashboard.entity_index', key=entity.key))


@dashboard_bp.route('/messages/<row_id>')
@login_required
def view_message(row_id):
    """Read a contact message; opening it marks it as read"""
    entity = ENTITIES['messages']
    message = fetch_row(entity, row_id)
    if message is None:
        abort(404)

    if not message['is_read']:
        try:
            message = update_row(entity, row_id, {'is_read': True})
        except StoreError as e:
            flash(f'Error marking message as read: {e.message}', 'error')
    return render_template('admin/message.html', entity=entity, message=message)
