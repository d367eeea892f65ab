"""
Utils Package - Centralized utility modules initialization
"""

from .decorators import login_required, anonymous_required
from .entities import ENTITIES, get_entity
from .data import (
    StoreError,
    RowNotFound,
    fetch_rows,
    fetch_single,
    fetch_row,
    insert_row,
    update_row,
    delete_row,
    toggle_field,
    save_single,
    import_content
)
from .forms import FormError, parse_form, form_values, split_list, join_list
from .storage import StorageError, upload_file
from .auth import AuthError, sign_up, sign_in, sign_out, get_session_context
from .security import get_client_ip, check_rate_limit, log_ip_activity
from .notifications import send_admin_notification, notify_new_message
from .helpers import get_unread_messages_count, group_skills, sanitize_about

__all__ = [
    # Decorators
    'login_required',
    'anonymous_required',

    # Entities
    'ENTITIES',
    'get_entity',

    # Data
    'StoreError',
    'RowNotFound',
    'fetch_rows',
    'fetch_single',
    'fetch_row',
    'insert_row',
    'update_row',
    'delete_row',
    'toggle_field',
    'save_single',
    'import_content',

    # Forms
    'FormError',
    'parse_form',
    'form_values',
    'split_list',
    'join_list',

    # Storage
    'StorageError',
    'upload_file',

    # Auth
    'AuthError',
    'sign_up',
    'sign_in',
    'sign_out',
    'get_session_context',

    # Security
    'get_client_ip',
    'check_rate_limit',
    'log_ip_activity',

    # Notifications
    'send_admin_notification',
    'notify_new_message',

    # Helpers
    'get_unread_messages_count',
    'group_skills',
    'sanitize_about'
]
