from datetime import date

import pytest
from utils.entities import ENTITIES
from utils.forms import FormError, split_list, join_list, form_values, parse_form, submitted_values


def test_split_list_trims_and_drops_empty_items():
    assert split_list('React, Node.js,  MongoDB ,', ',') == ['React', 'Node.js', 'MongoDB']
    assert split_list('Led the team\r\n\r\nShipped v2\n', '\n') == ['Led the team', 'Shipped v2']
    assert split_list('', ',') == []


def test_comma_list_survives_edit_load():
    text = 'React, Node.js, MongoDB'
    items = split_list(text, ',')
    assert items == ['React', 'Node.js', 'MongoDB']
    assert join_list(items, ',') == text


def test_newline_list_joins_with_newlines():
    assert join_list(['One', 'Two'], '\n') == 'One\nTwo'
    assert join_list([], '\n') == ''


def test_form_values_defaults_for_new_row():
    values = form_values(ENTITIES['testimonials'])
    assert values['rating'] == '5'
    assert values['is_visible'] is True
    assert values['order_index'] == '0'
    assert values['feedback'] == ''


def test_form_values_prefills_lists_and_links():
    project = {'title': 'CMS', 'tech_stack': ['Flask', 'SQLAlchemy'], 'is_featured': True}
    values = form_values(ENTITIES['projects'], project)
    assert values['tech_stack'] == 'Flask, SQLAlchemy'
    assert values['is_featured'] is True

    info = {'social_links': {'github': 'https://github.com/me', 'mastodon': 'https://m.social/@me'}}
    links = form_values(ENTITIES['contact-info'], info)['social_links']
    assert links['github'] == 'https://github.com/me'
    assert links['linkedin'] == ''
    assert links['mastodon'] == 'https://m.social/@me'


def test_parse_form_converts_types():
    values = parse_form(ENTITIES['projects'], {
        'title': ' Portfolio ',
        'description': 'A site',
        'tech_stack': 'React, Node.js, MongoDB',
        'is_featured': 'on',
        'order_index': '3',
    })
    assert values['title'] == 'Portfolio'
    assert values['tech_stack'] == ['React', 'Node.js', 'MongoDB']
    assert values['is_featured'] is True
    assert values['order_index'] == 3


def test_parse_form_unchecked_box_is_false():
    values = parse_form(ENTITIES['testimonials'], {'name': 'Ann', 'feedback': 'Great'})
    assert values['is_visible'] is False
    assert values['rating'] == 5


def test_parse_form_reports_every_missing_field():
    with pytest.raises(FormError) as exc:
        parse_form(ENTITIES['experience'], {'company_name': 'Acme'})
    assert exc.value.errors == ['Role is required', 'Duration is required']


@pytest.mark.parametrize('key,field,value', [
    ('skills', 'proficiency', '101'),
    ('skills', 'proficiency', '-1'),
    ('testimonials', 'rating', '0'),
    ('testimonials', 'rating', '6'),
])
def test_parse_form_rejects_out_of_range_numbers(key, field, value):
    entity = ENTITIES[key]
    form = {f.name: 'x' for f in entity.fields if f.required and f.kind != 'choice'}
    form[field] = value
    with pytest.raises(FormError) as exc:
        parse_form(entity, form)
    assert 'must be between' in str(exc.value)


def test_parse_form_rejects_unknown_choice_and_bad_date():
    with pytest.raises(FormError) as exc:
        parse_form(ENTITIES['content'], {
            'title': 'Talk', 'link': 'https://x.test', 'type': 'podcast', 'published_date': '12/01/2024'})
    assert len(exc.value.errors) == 2


def test_parse_form_dates():
    values = parse_form(ENTITIES['content'], {
        'title': 'Talk', 'link': 'https://x.test', 'type': 'video', 'published_date': '2024-01-12'})
    assert values['published_date'] == date(2024, 1, 12)
    assert values['type'] == 'video'


def test_parse_form_collects_social_links():
    values = parse_form(ENTITIES['contact-info'], {
        'email': 'me@example.com',
        'social_links.github': 'https://github.com/me',
        'social_links.linkedin': '',
        'social_links.__new_platform': 'Dribbble',
        'social_links.__new_url': 'https://dribbble.com/me',
    })
    assert values['social_links'] == {
        'github': 'https://github.com/me',
        'dribbble': 'https://dribbble.com/me',
    }


def test_parse_form_only_restricts_fields():
    values = parse_form(ENTITIES['messages'], {
        'name': 'Sam', 'email': 'sam@example.com', 'message': 'Hi', 'is_read': 'on'},
        only=('name', 'email', 'subject', 'message'))
    assert 'is_read' not in values
    assert values['subject'] == ''


def test_submitted_values_echoes_raw_input():
    values = submitted_values(ENTITIES['skills'], {'skill_name': 'Go', 'proficiency': '150'})
    assert values['skill_name'] == 'Go'
    assert values['proficiency'] == '150'
    assert values['category'] == ''
