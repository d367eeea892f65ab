"""
Security Module - Client IP tracking and rate limiting
"""

import time
from urllib.parse import urlsplit
from flask import request, current_app

RATE_LIMIT_EXTENSION_KEY = 'rate_limits'


def get_client_ip():
    """Get real client IP address"""
    forwarded = request.environ.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.environ.get('REMOTE_ADDR', 'unknown')


def check_rate_limit(endpoint='contact'):
    """Check if the client IP is within the rate limit for an endpoint"""
    max_requests = current_app.config.get('CONTACT_RATE_LIMIT', 5)
    window = current_app.config.get('CONTACT_RATE_WINDOW', 60)
    requests_by_ip = current_app.extensions.setdefault(RATE_LIMIT_EXTENSION_KEY, {})

    client_ip = get_client_ip()
    current_time = time.time()

    # Clean old requests outside the window
    history = [
        (ts, ep) for ts, ep in requests_by_ip.get(client_ip, [])
        if current_time - ts < window
    ]

    endpoint_requests = [ep for ts, ep in history if ep == endpoint]
    if len(endpoint_requests) >= max_requests:
        requests_by_ip[client_ip] = history
        current_app.logger.warning(f"Rate limit exceeded for {client_ip} on {endpoint}")
        return False

    history.append((current_time, endpoint))
    requests_by_ip[client_ip] = history
    return True


def safe_next(target):
    """Return target when it is a same-site relative path, else None"""
    if not target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith('/') or target.startswith('//'):
        return None
    return target


def log_ip_activity(activity_type, details=''):
    """Log IP activity for security tracking"""
    user_agent = request.headers.get('User-Agent', 'Unknown')[:100]
    current_app.logger.info(
        f"[security] {activity_type} ip={get_client_ip()} {details} ua={user_agent}")


__all__ = [
    'get_client_ip',
    'check_rate_limit',
    'log_ip_activity',
    'safe_next',
]
