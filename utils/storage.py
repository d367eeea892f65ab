"""
Storage Module - File uploads split into public buckets

Uploaded files are renamed to a random name, saved under
UPLOAD_FOLDER/<bucket>/ and served back by the pages.uploaded_file route.
"""

import os
import uuid
from flask import current_app, url_for
from werkzeug.utils import secure_filename
from .data import StoreError

IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg'}
DOCUMENT_EXTENSIONS = {'pdf', 'doc', 'docx'}

BUCKETS = {
    'avatars': IMAGE_EXTENSIONS,
    'projects': IMAGE_EXTENSIONS,
    'resumes': DOCUMENT_EXTENSIONS,
}


class StorageError(StoreError):
    pass


def file_extension(filename):
    if not filename or '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1].lower()


def allowed_file(filename, bucket):
    """Check if the file extension is accepted by the bucket"""
    return file_extension(filename) in BUCKETS.get(bucket, set())


def bucket_path(bucket):
    if bucket not in BUCKETS:
        raise StorageError(f"Unknown bucket: {bucket}")
    return os.path.join(current_app.config['UPLOAD_FOLDER'], bucket)


def public_url(bucket, filename):
    return url_for('pages.uploaded_file', bucket=bucket, filename=filename)


def upload_file(bucket, file):
    """
    Save an uploaded file into a bucket

    Args:
        bucket (str): Bucket name (avatars, projects, resumes)
        file (FileStorage): Uploaded file from request.files

    Returns:
        str: Public URL of the stored file

    Raises:
        StorageError: if the bucket rejects the file or it cannot be written
    """
    if not file or not file.filename:
        raise StorageError("No file selected")
    if not allowed_file(file.filename, bucket):
        allowed = ', '.join(sorted(BUCKETS.get(bucket, set())))
        raise StorageError(f"File type not allowed for {bucket} (allowed: {allowed})")

    ext = file_extension(secure_filename(file.filename)) or file_extension(file.filename)
    filename = f"{uuid.uuid4().hex}.{ext}"
    folder = bucket_path(bucket)
    try:
        os.makedirs(folder, exist_ok=True)
        file.save(os.path.join(folder, filename))
    except OSError as e:
        current_app.logger.error(f"✗ Upload to {bucket} failed: {str(e)}")
        raise StorageError(str(e)) from e

    current_app.logger.info(f"Uploaded {filename} to bucket {bucket}")
    return public_url(bucket, filename)


__all__ = ['StorageError', 'BUCKETS', 'allowed_file', 'upload_file', 'public_url', 'bucket_path']
