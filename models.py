from extensions import db
from datetime import datetime, date
from flask_login import UserMixin
from sqlalchemy import JSON
from werkzeug.security import generate_password_hash, check_password_hash
import uuid


# Custom JSON type that uses JSONB on PostgreSQL and JSON/Text on SQLite
class SafeJSON(db.TypeDecorator):
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


def new_id():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)


# ---------------------------------------------------------------------------
# Singletons
# ---------------------------------------------------------------------------

class HeroSection(db.Model):
    __tablename__ = 'hero_section'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), default='')
    profession = db.Column(db.String(255), default='')
    tagline = db.Column(db.Text, default='')
    avatar_url = db.Column(db.String(500), default='')
    resume_url = db.Column(db.String(500), default='')
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AboutMe(db.Model):
    __tablename__ = 'about_me'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    description = db.Column(db.Text, default='')
    quote = db.Column(db.Text, default='')
    photo_url = db.Column(db.String(500), default='')
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ContactInfo(db.Model):
    __tablename__ = 'contact_info'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), default='')
    phone = db.Column(db.String(50), default='')
    location = db.Column(db.String(255), default='')
    social_links = db.Column(SafeJSON, default=dict)  # {github, linkedin, youtube, ...}
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ---------------------------------------------------------------------------
# Ordered collections
# ---------------------------------------------------------------------------

class Skill(db.Model):
    __tablename__ = 'skills'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    category = db.Column(db.String(100), nullable=False)
    skill_name = db.Column(db.String(255), nullable=False)
    icon_name = db.Column(db.String(100), default='Code')
    proficiency = db.Column(db.Integer, default=80)
    order_index = db.Column(db.Integer, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    tech_stack = db.Column(SafeJSON, default=list)
    github_link = db.Column(db.String(500), default='')
    live_link = db.Column(db.String(500), default='')
    image_url = db.Column(db.String(500), default='')
    is_featured = db.Column(db.Boolean, default=False)
    order_index = db.Column(db.Integer, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Experience(db.Model):
    __tablename__ = 'experience'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    company_name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(255), nullable=False)
    duration = db.Column(db.String(100), nullable=False)
    achievements = db.Column(SafeJSON, default=list)
    order_index = db.Column(db.Integer, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Education(db.Model):
    __tablename__ = 'education'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    college_name = db.Column(db.String(255), nullable=False)
    degree = db.Column(db.String(255), nullable=False)
    duration = db.Column(db.String(100), nullable=False)
    notes = db.Column(db.Text, default='')
    order_index = db.Column(db.Integer, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Achievement(db.Model):
    __tablename__ = 'achievements'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.String(50), default='')
    icon_name = db.Column(db.String(100), default='Trophy')
    order_index = db.Column(db.Integer, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class ContentLink(db.Model):
    __tablename__ = 'blogs_youtube'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    link = db.Column(db.String(500), nullable=False)
    thumbnail_url = db.Column(db.String(500), default='')
    type = db.Column(db.String(20), nullable=False, default='blog')  # blog, video
    published_date = db.Column(db.Date, default=date.today, index=True)
    order_index = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Testimonial(db.Model):
    __tablename__ = 'testimonials'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(255), default='')
    feedback = db.Column(db.Text, nullable=False)
    avatar_url = db.Column(db.String(500), default='')
    rating = db.Column(db.Integer, default=5)
    is_visible = db.Column(db.Boolean, default=True)
    order_index = db.Column(db.Integer, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class ContactMessage(db.Model):
    __tablename__ = 'contact_messages'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), default='')
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
