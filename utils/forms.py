"""
Forms Module - Conversion between submitted form data and stored rows

Stored rows carry real types (lists, dicts, ints, dates). Forms only carry
text, so list fields travel as delimited text and are split back into lists
here and nowhere else.
"""

from datetime import date, datetime

TRUE_VALUES = {'on', 'true', '1', 'yes'}
NEW_KEY_SUFFIX = '__new_platform'
NEW_VALUE_SUFFIX = '__new_url'


class FormError(ValueError):
    """Raised when submitted form data does not pass validation"""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))


def split_list(text, delimiter):
    """Split delimited text into trimmed, non-empty items

    "React, Node.js, MongoDB" -> ["React", "Node.js", "MongoDB"]
    """
    if not text:
        return []
    if delimiter == '\n':
        parts = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    else:
        parts = text.split(delimiter)
    return [p.strip() for p in parts if p.strip()]


def join_list(items, delimiter):
    """Inverse of split_list, used to pre-fill edit forms"""
    if not items:
        return ''
    glue = '\n' if delimiter == '\n' else f'{delimiter} '
    return glue.join(str(item) for item in items)


def _format_value(field, value):
    if field.kind == 'list':
        return join_list(value or [], field.delimiter)
    if field.kind == 'map':
        links = {p: '' for p in field.choices}
        links.update(value or {})
        return links
    if field.kind == 'bool':
        return bool(value)
    if field.kind == 'date':
        if isinstance(value, (date, datetime)):
            return value.strftime('%Y-%m-%d')
        return value or ''
    if field.kind == 'int':
        return '' if value is None else str(value)
    return '' if value is None else value


def form_values(entity, row=None):
    """Build the values used to pre-fill an entity form

    Args:
        entity (Entity): Entity being edited
        row (dict, optional): Existing row; defaults are used when omitted

    Returns:
        dict: field name -> form-ready value
    """
    source = entity.defaults() if row is None else row
    return {f.name: _format_value(f, source.get(f.name, f.initial())) for f in entity.fields}


def _parse_map(field, form):
    prefix = f'{field.name}.'
    links = {}
    for key in form.keys():
        if not key.startswith(prefix):
            continue
        platform = key[len(prefix):]
        if platform in (NEW_KEY_SUFFIX, NEW_VALUE_SUFFIX):
            continue
        url = form.get(key, '').strip()
        if url:
            links[platform] = url

    new_platform = form.get(prefix + NEW_KEY_SUFFIX, '').strip().lower()
    new_url = form.get(prefix + NEW_VALUE_SUFFIX, '').strip()
    if new_platform and new_url:
        links[new_platform] = new_url
    return links


def _parse_field(field, form, errors):
    if field.kind == 'bool':
        return form.get(field.name, '').strip().lower() in TRUE_VALUES
    if field.kind == 'map':
        return _parse_map(field, form)

    raw = form.get(field.name, '')
    raw = raw.strip() if isinstance(raw, str) else raw

    if field.required and not raw:
        errors.append(f'{field.label} is required')
        return None

    if field.kind == 'list':
        return split_list(raw, field.delimiter)

    if field.kind == 'int':
        if raw == '':
            return field.initial()
        try:
            number = int(raw)
        except (TypeError, ValueError):
            errors.append(f'{field.label} must be a whole number')
            return None
        if field.minimum is not None and number < field.minimum:
            errors.append(f'{field.label} must be between {field.minimum} and {field.maximum}')
            return None
        if field.maximum is not None and number > field.maximum:
            errors.append(f'{field.label} must be between {field.minimum} and {field.maximum}')
            return None
        return number

    if field.kind == 'date':
        if not raw:
            return field.initial()
        try:
            return datetime.strptime(raw, '%Y-%m-%d').date()
        except ValueError:
            errors.append(f'{field.label} must be a date (YYYY-MM-DD)')
            return None

    if field.kind == 'choice' and raw and raw not in field.choices:
        errors.append(f'{field.label} must be one of: {", ".join(field.choices)}')
        return None

    return raw


def submitted_values(entity, form):
    """Echo raw submitted data back in form shape, for re-rendering after an error"""
    values = {}
    for field in entity.fields:
        if field.kind == 'bool':
            values[field.name] = form.get(field.name, '').strip().lower() in TRUE_VALUES
        elif field.kind == 'map':
            links = {p: '' for p in field.choices}
            links.update(_parse_map(field, form))
            values[field.name] = links
        else:
            values[field.name] = form.get(field.name, '')
    return values


def parse_form(entity, form, only=None):
    """Validate and convert submitted form data into store values

    Args:
        entity (Entity): Entity the form belongs to
        form (Mapping): Submitted form (request.form or a plain dict)
        only (iterable, optional): Restrict parsing to these field names

    Returns:
        dict: field name -> typed value

    Raises:
        FormError: if any field is missing or malformed
    """
    errors = []
    values = {}
    for field in entity.fields:
        if only is not None and field.name not in only:
            continue
        values[field.name] = _parse_field(field, form, errors)
    if errors:
        raise FormError(errors)
    return values


__all__ = [
    'FormError',
    'split_list',
    'join_list',
    'form_values',
    'submitted_values',
    'parse_form',
]
