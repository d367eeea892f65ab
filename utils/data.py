"""
Data Management Module - Generic select/insert/update/delete over entity tables

Every function takes an Entity from utils.entities and returns plain dicts,
so templates and the query cache never hold live ORM instances.
"""

from datetime import datetime, date
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError, DBAPIError
from extensions import db
from .cache import cached_query, invalidate
from .entities import ENTITIES


class StoreError(Exception):
    """A backing-store operation failed; message is safe to show the admin"""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class RowNotFound(StoreError):
    pass


def _error_message(exc):
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


def _fail(exc, action, entity):
    db.session.rollback()
    message = _error_message(exc)
    current_app.logger.error(f"✗ Store error while {action} {entity.table}: {message}")
    raise StoreError(message) from exc


def row_to_dict(entity, row):
    """Convert a model instance into a dictionary of its entity fields"""
    if row is None:
        return None
    result = {'id': row.id}
    for name in entity.field_names():
        result[name] = getattr(row, name)
    for stamp in ('created_at', 'updated_at'):
        if hasattr(row, stamp):
            result[stamp] = getattr(row, stamp)
    return result


def _ordering(entity):
    model = entity.model
    clauses = []
    for column, direction in entity.order_by:
        attr = getattr(model, column)
        clauses.append(attr.desc() if direction == 'desc' else attr.asc())
    # Stable tie-break for equal order_index values
    if 'created_at' not in dict(entity.order_by):
        clauses.append(model.created_at.asc())
    clauses.append(model.id.asc())
    return clauses


def _get_or_raise(entity, row_id):
    row = db.session.get(entity.model, row_id)
    if row is None:
        raise RowNotFound(f"{entity.label} {row_id} not found")
    return row


def _assign(entity, row, values):
    allowed = set(entity.field_names())
    for name, value in values.items():
        if name in allowed:
            setattr(row, name, value)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def fetch_rows(entity, **filters):
    """
    Fetch all rows of an entity in display order

    Args:
        entity (Entity): Entity to read
        **filters: Column equality filters, e.g. is_visible=True

    Returns:
        list: Row dictionaries
    """
    def load():
        try:
            query = entity.model.query.filter_by(**filters).order_by(*_ordering(entity))
            return [row_to_dict(entity, r) for r in query.all()]
        except SQLAlchemyError as e:
            _fail(e, 'listing', entity)

    variant = ('list',) + tuple(sorted(filters.items()))
    return list(cached_query(entity.key, variant, load))


def fetch_single(entity):
    """Fetch the singleton row of an entity, or None when the table is empty"""
    def load():
        try:
            return row_to_dict(entity, entity.model.query.order_by(entity.model.id.asc()).first())
        except SQLAlchemyError as e:
            _fail(e, 'reading', entity)

    return cached_query(entity.key, ('single',), load)


def fetch_row(entity, row_id):
    """Fetch one row by id, or None"""
    try:
        return row_to_dict(entity, db.session.get(entity.model, row_id))
    except SQLAlchemyError as e:
        _fail(e, 'reading', entity)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def insert_row(entity, values):
    """
    Insert a row, filling unspecified fields with the entity defaults

    Returns:
        dict: The stored row

    Raises:
        StoreError: if the database rejects the insert
    """
    fields = entity.defaults()
    fields.update({k: v for k, v in values.items() if k in fields})
    try:
        row = entity.model(**fields)
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError as e:
        _fail(e, 'inserting into', entity)

    invalidate(entity.key)
    current_app.logger.info(f"Inserted {entity.table} row {row.id}")
    return row_to_dict(entity, row)


def update_row(entity, row_id, values):
    """Update only the given fields of one row"""
    try:
        row = _get_or_raise(entity, row_id)
        _assign(entity, row, values)
        db.session.commit()
    except SQLAlchemyError as e:
        _fail(e, 'updating', entity)

    invalidate(entity.key)
    current_app.logger.info(f"Updated {entity.table} row {row_id}: {', '.join(sorted(values))}")
    return row_to_dict(entity, row)


def delete_row(entity, row_id):
    """Delete one row by id. There is no undo."""
    try:
        row = _get_or_raise(entity, row_id)
        db.session.delete(row)
        db.session.commit()
    except SQLAlchemyError as e:
        _fail(e, 'deleting from', entity)

    invalidate(entity.key)
    current_app.logger.info(f"Deleted {entity.table} row {row_id}")


def toggle_field(entity, row_id, field_name):
    """Flip one boolean column of a row, leaving every other column untouched"""
    if field_name not in entity.toggles:
        raise StoreError(f"{field_name} cannot be toggled on {entity.label.lower()}")
    try:
        row = _get_or_raise(entity, row_id)
        current = bool(getattr(row, field_name))
    except SQLAlchemyError as e:
        _fail(e, 'reading', entity)
    return update_row(entity, row_id, {field_name: not current})


def save_single(entity, values):
    """Update the singleton row, inserting it first when the table is empty"""
    try:
        existing = entity.model.query.order_by(entity.model.id.asc()).first()
    except SQLAlchemyError as e:
        _fail(e, 'reading', entity)

    if existing is None:
        return insert_row(entity, values)
    return update_row(entity, existing.id, values)


# ---------------------------------------------------------------------------
# Bulk import
# ---------------------------------------------------------------------------

def parse_date(value):
    """Parse an ISO date or datetime string; returns None when unparseable"""
    if not value or isinstance(value, (date, datetime)):
        return value or None
    formats = ['%Y-%m-%d %H:%M:%S', '%Y-%m-%d', '%Y-%m-%dT%H:%M:%S.%f', '%Y-%m-%dT%H:%M:%S']
    for fmt in formats:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return parsed
    return None


def import_content(payload):
    """
    Load a content export into the tables

    Args:
        payload (dict): Table name -> list of rows (or a single row object
            for singleton tables), as produced by a table dump

    Returns:
        dict: Table name -> number of rows inserted
    """
    by_table = {e.table: e for e in ENTITIES.values()}
    counts = {}
    for table, rows in payload.items():
        entity = by_table.get(table)
        if entity is None:
            current_app.logger.warning(f"Skipping unknown table in import: {table}")
            continue
        if isinstance(rows, dict):
            rows = [rows]
        if entity.singleton:
            rows = rows[:1]

        inserted = 0
        for raw in rows:
            values = {k: v for k, v in raw.items() if k in entity.field_names()}
            for f in entity.fields:
                if f.kind == 'date' and f.name in values:
                    parsed = parse_date(values[f.name])
                    values[f.name] = parsed.date() if isinstance(parsed, datetime) else parsed
            if entity.singleton:
                save_single(entity, values)
            else:
                insert_row(entity, values)
            inserted += 1
        counts[table] = inserted
        current_app.logger.info(f"✓ Imported {inserted} rows into {table}")
    return counts


__all__ = [
    'StoreError',
    'RowNotFound',
    'row_to_dict',
    'fetch_rows',
    'fetch_single',
    'fetch_row',
    'insert_row',
    'update_row',
    'delete_row',
    'toggle_field',
    'save_single',
    'import_content',
]
