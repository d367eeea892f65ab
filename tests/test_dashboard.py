import io
from urllib.parse import urlsplit

from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from utils.entities import ENTITIES
from utils.data import fetch_rows, fetch_single, insert_row


def rows(app, key, **filters):
    with app.app_context():
        return fetch_rows(ENTITIES[key], **filters)


def add(app, key, values):
    with app.app_context():
        return insert_row(ENTITIES[key], values)


def test_dashboard_lists_every_entity(auth_client, app):
    add(app, 'messages', {'name': 'Sam', 'email': 'sam@example.com', 'message': 'Hi'})

    response = auth_client.get('/admin/dashboard')

    assert response.status_code == 200
    for entity in ENTITIES.values():
        assert entity.plural.encode() in response.data
    assert b'1 unread' in response.data


def test_unknown_entity_is_404(auth_client):
    assert auth_client.get('/admin/widgets').status_code == 404
    assert auth_client.get('/admin/widgets/new').status_code == 404


def test_list_renders_in_order_index_order(auth_client, app):
    add(app, 'education', {'college_name': 'Second U', 'degree': 'MSc', 'duration': '2020', 'order_index': 2})
    add(app, 'education', {'college_name': 'First U', 'degree': 'BSc', 'duration': '2016', 'order_index': 1})

    body = auth_client.get('/admin/education').get_data(as_text=True)

    assert body.index('First U') < body.index('Second U')


def test_create_testimonial(auth_client, app):
    response = auth_client.post('/admin/testimonials/new', data={
        'name': 'Priya',
        'role': 'CTO at Tech Corp',
        'feedback': 'Shipped on time.',
        'rating': '4',
        'is_visible': 'on',
        'order_index': '0',
    }, follow_redirects=True)

    assert response.status_code == 200
    assert b'Testimonial added successfully!' in response.data
    stored = rows(app, 'testimonials')
    assert len(stored) == 1
    assert stored[0]['name'] == 'Priya'
    assert stored[0]['rating'] == 4
    assert stored[0]['is_visible'] is True


def test_create_achievement_with_default_order(auth_client, app):
    auth_client.post('/admin/achievements/new', data={
        'title': 'Hackathon Winner',
        'description': 'First place',
        'date': '2023',
        'icon_name': 'Trophy',
    })

    stored = rows(app, 'achievements')
    assert len(stored) == 1
    achievement = stored[0]
    assert achievement['title'] == 'Hackathon Winner'
    assert achievement['description'] == 'First place'
    assert achievement['date'] == '2023'
    assert achievement['icon_name'] == 'Trophy'
    assert achievement['order_index'] == 0


def test_tech_stack_round_trips_through_edit_form(auth_client, app):
    auth_client.post('/admin/projects/new', data={
        'title': 'Portfolio',
        'description': 'This site',
        'tech_stack': 'React, Node.js, MongoDB',
    })

    project = rows(app, 'projects')[0]
    assert project['tech_stack'] == ['React', 'Node.js', 'MongoDB']

    form = auth_client.get(f"/admin/projects/{project['id']}/edit")
    assert form.status_code == 200
    assert b'value="React, Node.js, MongoDB"' in form.data


def test_validation_error_rerenders_with_submitted_values(auth_client, app):
    response = auth_client.post('/admin/skills/new', data={
        'category': 'Backend',
        'skill_name': 'Go',
        'proficiency': '150',
    })

    assert response.status_code == 400
    body = response.get_data(as_text=True)
    assert 'Error adding skill: Proficiency (%) must be between 0 and 100' in body
    assert 'value="150"' in body
    assert 'value="Go"' in body
    assert rows(app, 'skills') == []


def test_edit_changes_only_that_row(auth_client, app):
    first = add(app, 'experience', {'company_name': 'Acme', 'role': 'Dev', 'duration': '2020'})
    other = add(app, 'experience', {'company_name': 'Globex', 'role': 'Lead', 'duration': '2022'})

    response = auth_client.post(f"/admin/experience/{first['id']}/edit", data={
        'company_name': 'Acme',
        'role': 'Senior Dev',
        'duration': '2020',
        'achievements': 'Cut build time in half\nMentored two interns',
        'order_index': '0',
    }, follow_redirects=True)

    assert b'Experience updated successfully!' in response.data
    by_id = {r['id']: r for r in rows(app, 'experience')}
    assert by_id[first['id']]['role'] == 'Senior Dev'
    assert by_id[first['id']]['achievements'] == ['Cut build time in half', 'Mentored two interns']
    assert by_id[other['id']]['role'] == 'Lead'


def test_edit_unknown_row_is_404(auth_client):
    assert auth_client.get('/admin/skills/missing/edit').status_code == 404


def test_delete_row(auth_client, app):
    skill = add(app, 'skills', {'skill_name': 'Perl'})

    response = auth_client.post(f"/admin/skills/{skill['id']}/delete", follow_redirects=True)

    assert b'Skill deleted successfully!' in response.data
    assert rows(app, 'skills') == []


def test_failed_delete_shows_store_message_and_keeps_row(auth_client, app, monkeypatch):
    skill = add(app, 'skills', {'skill_name': 'Cobol'})

    def broken_commit():
        raise SQLAlchemyError('database is locked')

    monkeypatch.setattr(db.session, 'commit', broken_commit)
    response = auth_client.post(f"/admin/skills/{skill['id']}/delete", follow_redirects=True)
    monkeypatch.undo()

    assert b'Error deleting skill: database is locked' in response.data
    assert [r['id'] for r in rows(app, 'skills')] == [skill['id']]


def test_toggle_visibility_hides_testimonial(auth_client, app):
    testimonial = add(app, 'testimonials', {'name': 'Lee', 'feedback': 'Solid work', 'rating': 3})

    response = auth_client.post(f"/admin/testimonials/{testimonial['id']}/toggle/is_visible")

    assert response.status_code == 302
    stored = rows(app, 'testimonials')[0]
    assert stored['is_visible'] is False
    assert stored['rating'] == 3
    assert stored['feedback'] == 'Solid work'
    assert b'Solid work' not in auth_client.get('/').data


def test_toggle_unknown_field_is_404(auth_client, app):
    testimonial = add(app, 'testimonials', {'name': 'Lee', 'feedback': 'x'})
    response = auth_client.post(f"/admin/testimonials/{testimonial['id']}/toggle/rating")
    assert response.status_code == 404


def test_singleton_form_creates_then_updates(auth_client, app):
    assert auth_client.get('/admin/hero').status_code == 200

    response = auth_client.post('/admin/hero', data={
        'name': 'Jane Doe', 'profession': 'Full Stack Developer', 'tagline': 'Hi'},
        follow_redirects=True)
    assert b'Hero section updated successfully!' in response.data

    auth_client.post('/admin/hero', data={'name': 'Jane Doe', 'profession': 'Engineer'})
    with app.app_context():
        hero = ENTITIES['hero']
        assert hero.model.query.count() == 1
        assert fetch_single(hero)['profession'] == 'Engineer'


def test_singleton_has_no_new_or_delete(auth_client):
    assert auth_client.get('/admin/about/new').status_code == 404
    assert auth_client.post('/admin/about/some-id/delete').status_code == 404


def test_contact_info_social_links(auth_client, app):
    auth_client.post('/admin/contact-info', data={
        'email': 'me@example.com',
        'social_links.github': 'https://github.com/me',
        'social_links.__new_platform': 'mastodon',
        'social_links.__new_url': 'https://m.social/@me',
    })

    with app.app_context():
        info = fetch_single(ENTITIES['contact-info'])
    assert info['social_links'] == {'github': 'https://github.com/me', 'mastodon': 'https://m.social/@me'}


def test_upload_sets_image_url(auth_client, app):
    response = auth_client.post('/admin/projects/new', data={
        'title': 'Shot',
        'description': 'With image',
        'image_url_file': (io.BytesIO(b'\x89PNG fake'), 'screenshot.png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 302
    image_url = rows(app, 'projects')[0]['image_url']
    assert image_url.startswith('/uploads/projects/')
    assert image_url.endswith('.png')
    assert auth_client.get(image_url).data == b'\x89PNG fake'


def test_upload_rejects_wrong_file_type(auth_client, app):
    response = auth_client.post('/admin/hero', data={
        'name': 'Jane', 'profession': 'Dev',
        'resume_url_file': (io.BytesIO(b'MZ'), 'resume.exe'),
    }, content_type='multipart/form-data')

    assert response.status_code == 400
    assert b'Error uploading file: File type not allowed for resumes' in response.data
    with app.app_context():
        assert fetch_single(ENTITIES['hero']) is None


def test_messages_are_read_only(auth_client, app):
    message = add(app, 'messages', {'name': 'Sam', 'email': 'sam@example.com', 'message': 'Hello there'})

    assert auth_client.get('/admin/messages/new').status_code == 404
    assert auth_client.get(f"/admin/messages/{message['id']}/edit").status_code == 404

    listing = auth_client.get('/admin/messages')
    assert b'Hello there' in listing.data


def test_opening_a_message_marks_it_read(auth_client, app):
    message = add(app, 'messages', {'name': 'Sam', 'email': 'sam@example.com', 'message': 'Hello there'})

    response = auth_client.get(f"/admin/messages/{message['id']}")

    assert response.status_code == 200
    assert b'Hello there' in response.data
    assert rows(app, 'messages')[0]['is_read'] is True
    assert auth_client.get('/admin/messages/missing').status_code == 404


def break_commit(monkeypatch):
    def broken_commit():
        raise SQLAlchemyError('disk I/O error')

    monkeypatch.setattr(db.session, 'commit', broken_commit)


def test_failed_create_keeps_form_and_stores_nothing(auth_client, app, monkeypatch):
    break_commit(monkeypatch)
    response = auth_client.post('/admin/projects/new', data={
        'title': 'Portfolio',
        'description': 'This site',
        'tech_stack': 'Flask, Jinja',
    })
    monkeypatch.undo()

    assert response.status_code == 500
    body = response.get_data(as_text=True)
    assert 'Error adding project: disk I/O error' in body
    assert 'value="Portfolio"' in body
    assert 'value="Flask, Jinja"' in body
    assert rows(app, 'projects') == []


def test_failed_edit_keeps_form_and_stored_row(auth_client, app, monkeypatch):
    project = add(app, 'projects', {'title': 'Original', 'description': 'Before', 'tech_stack': ['Go']})

    break_commit(monkeypatch)
    response = auth_client.post(f"/admin/projects/{project['id']}/edit", data={
        'title': 'Renamed',
        'description': 'After',
        'tech_stack': 'Rust',
    })
    monkeypatch.undo()

    assert response.status_code == 500
    body = response.get_data(as_text=True)
    assert 'Error updating project: disk I/O error' in body
    assert 'value="Renamed"' in body
    assert '>After</textarea>' in body

    stored = rows(app, 'projects')[0]
    assert stored['title'] == 'Original'
    assert stored['description'] == 'Before'
    assert stored['tech_stack'] == ['Go']


def test_failed_toggle_reports_message_and_keeps_value(auth_client, app, monkeypatch):
    testimonial = add(app, 'testimonials', {'name': 'Lee', 'feedback': 'Solid work'})

    break_commit(monkeypatch)
    response = auth_client.post(
        f"/admin/testimonials/{testimonial['id']}/toggle/is_visible", follow_redirects=True)
    monkeypatch.undo()

    assert b'Error updating testimonial: disk I/O error' in response.data
    assert rows(app, 'testimonials')[0]['is_visible'] is True


def test_toggle_follows_local_next_only(auth_client, app):
    testimonial = add(app, 'testimonials', {'name': 'Lee', 'feedback': 'x'})
    toggle_url = f"/admin/testimonials/{testimonial['id']}/toggle/is_visible"

    response = auth_client.post(toggle_url, data={'next': '/admin/dashboard'})
    assert urlsplit(response.headers['Location']).path == '/admin/dashboard'

    for target in ('https://evil.example/phish', '//evil.example/phish'):
        response = auth_client.post(toggle_url, data={'next': target})
        assert urlsplit(response.headers['Location']).path == '/admin/testimonials'
        assert 'evil.example' not in response.headers['Location']
