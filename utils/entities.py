"""
Entities Module - Table-driven description of every content type

Each Entity tells the generic manager which model backs it, which fields the
admin form shows, how the rows are ordered and which booleans can be toggled.
"""

from datetime import date
from models import (
    HeroSection, AboutMe, ContactInfo, Skill, Project, Experience,
    Education, Achievement, ContentLink, Testimonial, ContactMessage
)


SKILL_CATEGORIES = ['Frontend', 'Backend', 'Tools', 'Others']
CONTENT_TYPES = ['blog', 'video']
SOCIAL_PLATFORMS = ['github', 'linkedin', 'youtube', 'instagram', 'twitter']

COMMA = ','
NEWLINE = '\n'


class Field:
    """One editable column of an entity.

    kind is one of: text, textarea, url, email, int, bool, choice, date,
    list (delimited text in the form, a list in the store) and map
    (platform -> url pairs).
    """

    def __init__(self, name, label, kind='text', required=False, default=None,
                 choices=None, delimiter=None, bucket=None, minimum=None,
                 maximum=None, placeholder=''):
        self.name = name
        self.label = label
        self.kind = kind
        self.required = required
        self.default = default
        self.choices = choices or []
        self.delimiter = delimiter
        self.bucket = bucket
        self.minimum = minimum
        self.maximum = maximum
        self.placeholder = placeholder

    def initial(self):
        """Default value for a fresh row"""
        if callable(self.default):
            return self.default()
        if self.default is not None:
            return self.default
        if self.kind == 'bool':
            return False
        if self.kind == 'int':
            return 0
        if self.kind == 'list':
            return []
        if self.kind == 'map':
            return {}
        return ''

    def __repr__(self):
        return f'<Field {self.name} ({self.kind})>'


class Entity:
    """A content type backed by one table"""

    def __init__(self, key, model, label, plural, fields, order_by=None,
                 singleton=False, toggles=(), creatable=True, title_field=None,
                 public_filters=None):
        self.key = key
        self.model = model
        self.label = label
        self.plural = plural
        self.fields = fields
        self.order_by = order_by or [('order_index', 'asc')]
        self.singleton = singleton
        self.toggles = tuple(toggles)
        self.creatable = creatable
        self.title_field = title_field or fields[0].name
        self.public_filters = public_filters or {}

    @property
    def table(self):
        return self.model.__tablename__

    def field(self, name):
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def field_names(self):
        return [f.name for f in self.fields]

    def upload_fields(self):
        return [f for f in self.fields if f.bucket]

    def defaults(self):
        return {f.name: f.initial() for f in self.fields}

    def __repr__(self):
        return f'<Entity {self.key}>'


def _order_field():
    return Field('order_index', 'Order Index', 'int', default=0)


ENTITIES = {}


def register(entity):
    ENTITIES[entity.key] = entity
    return entity


register(Entity(
    'hero', HeroSection, 'Hero section', 'Hero Section',
    singleton=True,
    fields=[
        Field('name', 'Name', required=True, placeholder='Jane Doe'),
        Field('profession', 'Profession', required=True, placeholder='Full Stack Developer'),
        Field('tagline', 'Tagline', 'textarea'),
        Field('avatar_url', 'Avatar URL', 'url', bucket='avatars', placeholder='https://... or upload below'),
        Field('resume_url', 'Resume URL', 'url', bucket='resumes', placeholder='https://... or upload below'),
    ]))

register(Entity(
    'about', AboutMe, 'About section', 'About Me',
    singleton=True,
    fields=[
        Field('description', 'Description', 'textarea', required=True),
        Field('quote', 'Quote', 'textarea'),
        Field('photo_url', 'Photo URL', 'url', bucket='avatars'),
    ]))

register(Entity(
    'skills', Skill, 'Skill', 'Skills',
    title_field='skill_name',
    fields=[
        Field('category', 'Category', 'choice', required=True, default='Frontend',
              choices=SKILL_CATEGORIES),
        Field('skill_name', 'Skill Name', required=True, placeholder='React'),
        Field('icon_name', 'Icon Name', default='Code', placeholder='Code'),
        Field('proficiency', 'Proficiency (%)', 'int', default=80, minimum=0, maximum=100),
        _order_field(),
    ]))

register(Entity(
    'projects', Project, 'Project', 'Projects',
    toggles=['is_featured'],
    fields=[
        Field('title', 'Title', required=True),
        Field('description', 'Description', 'textarea', required=True),
        Field('tech_stack', 'Tech Stack (comma separated)', 'list', delimiter=COMMA,
              placeholder='React, Node.js, MongoDB'),
        Field('github_link', 'GitHub Link', 'url'),
        Field('live_link', 'Live Link', 'url'),
        Field('image_url', 'Image URL', 'url', bucket='projects'),
        Field('is_featured', 'Featured', 'bool', default=False),
        _order_field(),
    ]))

register(Entity(
    'experience', Experience, 'Experience', 'Experience',
    title_field='company_name',
    fields=[
        Field('company_name', 'Company Name', required=True),
        Field('role', 'Role', required=True),
        Field('duration', 'Duration', required=True, placeholder='Jan 2022 - Present'),
        Field('achievements', 'Achievements (one per line)', 'list', delimiter=NEWLINE),
        _order_field(),
    ]))

register(Entity(
    'education', Education, 'Education', 'Education',
    title_field='college_name',
    fields=[
        Field('college_name', 'College Name', required=True),
        Field('degree', 'Degree', required=True),
        Field('duration', 'Duration', required=True, placeholder='2018 - 2022'),
        Field('notes', 'Notes', 'textarea'),
        _order_field(),
    ]))

register(Entity(
    'achievements', Achievement, 'Achievement', 'Achievements',
    fields=[
        Field('title', 'Title', required=True),
        Field('description', 'Description', 'textarea', required=True),
        Field('date', 'Date', placeholder='2023'),
        Field('icon_name', 'Icon Name', default='Trophy'),
        _order_field(),
    ]))

register(Entity(
    'content', ContentLink, 'Content', 'Content (Blogs/Videos)',
    order_by=[('published_date', 'desc')],
    fields=[
        Field('title', 'Title', required=True),
        Field('link', 'Link', 'url', required=True),
        Field('thumbnail_url', 'Thumbnail URL', 'url'),
        Field('type', 'Type', 'choice', required=True, default='blog', choices=CONTENT_TYPES),
        Field('published_date', 'Published Date', 'date', default=date.today),
        _order_field(),
    ]))

register(Entity(
    'testimonials', Testimonial, 'Testimonial', 'Testimonials',
    toggles=['is_visible'],
    public_filters={'is_visible': True},
    fields=[
        Field('name', 'Name', required=True, placeholder='John Doe'),
        Field('role', 'Role/Title', placeholder='CTO at Tech Corp'),
        Field('feedback', 'Feedback', 'textarea', required=True),
        Field('avatar_url', 'Avatar URL (optional)', 'url'),
        Field('rating', 'Rating (1-5)', 'int', default=5, minimum=1, maximum=5),
        Field('is_visible', 'Visible on portfolio', 'bool', default=True),
        _order_field(),
    ]))

register(Entity(
    'contact-info', ContactInfo, 'Contact info', 'Contact Info',
    singleton=True,
    fields=[
        Field('email', 'Email', 'email'),
        Field('phone', 'Phone'),
        Field('location', 'Location'),
        Field('social_links', 'Social Links', 'map', default=dict, choices=SOCIAL_PLATFORMS),
    ]))

register(Entity(
    'messages', ContactMessage, 'Message', 'Messages',
    order_by=[('created_at', 'desc')],
    toggles=['is_read'],
    creatable=False,
    fields=[
        Field('name', 'Name', required=True),
        Field('email', 'Email', 'email', required=True),
        Field('subject', 'Subject'),
        Field('message', 'Message', 'textarea', required=True),
        Field('is_read', 'Read', 'bool', default=False),
    ]))


def get_entity(key):
    """Look up an entity by its admin key, raising KeyError when unknown"""
    return ENTITIES[key]


__all__ = [
    'Field',
    'Entity',
    'ENTITIES',
    'get_entity',
    'SKILL_CATEGORIES',
    'CONTENT_TYPES',
    'SOCIAL_PLATFORMS',
]
