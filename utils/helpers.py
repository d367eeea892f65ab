"""
Helpers Module - Small utilities shared by views and templates
"""

import re
from flask import current_app
from markupsafe import escape, Markup
from sqlalchemy.exc import SQLAlchemyError
from .entities import SKILL_CATEGORIES

ALLOWED_ABOUT_TAGS = ['p', 'br', 'strong', 'em', 'ul', 'ol', 'li', 'span', 'b', 'i', 'u']


def get_unread_messages_count():
    """Count contact messages the owner has not read yet"""
    from models import ContactMessage
    try:
        return ContactMessage.query.filter_by(is_read=False).count()
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error getting unread messages count: {str(e)}")
        return 0


def group_skills(skills):
    """Group ordered skills by category, known categories first

    Returns:
        list: (category, skills) pairs; empty categories are left out
    """
    groups = {}
    for skill in skills:
        groups.setdefault(skill.get('category') or 'Others', []).append(skill)

    ordered = [c for c in SKILL_CATEGORIES if c in groups]
    ordered += sorted(c for c in groups if c not in SKILL_CATEGORIES)
    return [(c, groups[c]) for c in ordered]


def format_date(value, fmt='%b %d, %Y'):
    if not value:
        return ''
    if hasattr(value, 'strftime'):
        return value.strftime(fmt)
    return str(value)


def _strip_attrs(match):
    tag = match.group(1).lower()
    attrs = match.group(2) or ''
    if tag == 'span':
        # keep only a sanitized class attribute on span
        m = re.search(r'class\s*=\s*"([^"]+)"', attrs)
        if m:
            cls_val = re.sub(r'[^a-zA-Z0-9_\-\s]', '', m.group(1))
            return f'<{tag} class="{cls_val}">'
    return f'<{tag}>'


def sanitize_about(text):
    """Sanitize the About description for rendering on the public page.

    - Removes <script> and <style> blocks
    - Keeps a small set of inline tags and drops their attributes
    - Plain text is escaped; blank lines become paragraphs, single newlines <br>
    """
    if not text:
        return Markup('')

    txt = text.replace('\r\n', '\n').replace('\r', '\n')
    txt = re.sub(r'\n\s*\n+', '\n\n', txt).strip()
    txt = re.sub(r'<(script|style).*?>.*?</\1>', '', txt, flags=re.I | re.S)

    if '<' not in txt and '>' not in txt:
        paragraphs = [p.strip() for p in re.split(r'\n\s*\n', str(escape(txt))) if p.strip()]
        return Markup(''.join(f"<p>{p.replace(chr(10), '<br>')}</p>" for p in paragraphs))

    # Drop disallowed tags but keep their inner text
    txt = re.sub(r'</?(?!(' + '|'.join(ALLOWED_ABOUT_TAGS) + r')\b)[^>]*>', '', txt, flags=re.I)
    txt = re.sub(r'<(\w+)([^>]*)>', _strip_attrs, txt, flags=re.I)
    txt = re.sub(r'(?:(?:<br\s*/?>)\s*){2,}', '<br>', txt, flags=re.I)

    blocks = [b.strip() for b in re.split(r'\n\s*\n', txt) if b.strip()]
    html = ''.join(
        b if '<p' in b.lower() else f"<p>{b.replace(chr(10), '<br>')}</p>"
        for b in blocks
    )
    return Markup(html)


__all__ = [
    'get_unread_messages_count',
    'group_skills',
    'format_date',
    'sanitize_about',
]
