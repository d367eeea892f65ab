"""
Notifications Module - Telegram and email alerts for the site owner
"""

import smtplib
import threading
import requests
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from flask import current_app
from markupsafe import escape


def get_admin_notifications_config():
    """Load admin notification settings from the app config"""
    return {
        'telegram': {
            'bot_token': current_app.config.get('ADMIN_TELEGRAM_BOT_TOKEN') or '',
            'chat_id': current_app.config.get('ADMIN_TELEGRAM_CHAT_ID') or ''
        },
        'smtp': {
            'host': current_app.config.get('ADMIN_SMTP_HOST') or '',
            'port': current_app.config.get('ADMIN_SMTP_PORT') or '587',
            'email': current_app.config.get('ADMIN_SMTP_EMAIL') or '',
            'password': current_app.config.get('ADMIN_SMTP_PASSWORD') or '',
            'recipient': current_app.config.get('ADMIN_RECIPIENT_EMAIL') or ''
        }
    }


def send_telegram_message(bot_token, chat_id, text, logger):
    url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
    payload = {'chat_id': chat_id, 'text': text, 'parse_mode': 'HTML'}
    try:
        response = requests.post(url, json=payload, timeout=10)
        response.raise_for_status()
        logger.info("Admin Telegram notification sent")
    except requests.exceptions.RequestException as e:
        logger.error(f"Admin Telegram Error: {str(e)}")


def send_smtp_message(smtp_cfg, msg, logger):
    try:
        with smtplib.SMTP(smtp_cfg['host'], int(smtp_cfg.get('port') or 587)) as server:
            server.starttls()
            server.login(smtp_cfg['email'], smtp_cfg['password'])
            server.send_message(msg)
        logger.info("Admin SMTP notification sent")
    except (smtplib.SMTPException, OSError, ValueError) as e:
        logger.error(f"Admin SMTP send error: {str(e)}")


def send_admin_notification(subject, message_text, html_body=None):
    """
    Send a notification to the site owner via Telegram and SMTP

    Each channel is used only when its credentials are configured. Delivery
    happens on background threads, so a slow or failing channel never blocks
    the request that triggered it.

    Args:
        subject (str): Notification subject
        message_text (str): Plain-text notification message
        html_body (str, optional): HTML version of the message

    Returns:
        list: Started threads, one per configured channel
    """
    config = get_admin_notifications_config()
    logger = current_app.logger
    threads = []

    tg_token = config['telegram']['bot_token']
    tg_chat = config['telegram']['chat_id']
    if tg_token and tg_chat:
        text = f"📬 <b>{escape(subject)}</b>\n\n{escape(message_text)}"
        threads.append(threading.Thread(
            target=send_telegram_message, args=(tg_token, tg_chat, text, logger), daemon=True))
    else:
        logger.debug("Admin Telegram credentials not configured")

    smtp_cfg = config['smtp']
    if all([smtp_cfg.get('host'), smtp_cfg.get('email'), smtp_cfg.get('password')]):
        msg = MIMEMultipart('alternative')
        msg['Subject'] = f"[Portfolio] {subject}"
        msg['From'] = smtp_cfg['email']
        msg['To'] = smtp_cfg.get('recipient') or smtp_cfg['email']
        msg.attach(MIMEText(message_text, 'plain'))
        if html_body:
            msg.attach(MIMEText(html_body, 'html'))
        threads.append(threading.Thread(
            target=send_smtp_message, args=(smtp_cfg, msg, logger), daemon=True))
    else:
        logger.debug("Admin SMTP credentials not configured")

    for thread in threads:
        thread.start()
    return threads


def notify_new_message(message):
    """Tell the owner a visitor used the contact form"""
    body = message['message']
    preview = body[:300] + ('...' if len(body) > 300 else '')
    text = (
        f"From: {message['name']} <{message['email']}>\n"
        f"Subject: {message.get('subject') or '(none)'}\n\n"
        f"{preview}"
    )
    return send_admin_notification('New contact message', text)


__all__ = [
    'get_admin_notifications_config',
    'send_admin_notification',
    'notify_new_message',
]
