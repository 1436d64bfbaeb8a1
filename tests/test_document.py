from playweb import document as model
from playweb.document import AttachmentType, PublishState


def test_normalize():

    raw = {
        'play_element': {
            'description': {'value': 'wrapped'},
            'publish_state_type': 'PUBLISH_STATE_PUBLISHED',
        },
        'play_element_design': {
            'attachments': [
                {'filename': {'value': 'Script.ts'}, 'attachment_type': 'SCRIPT', 'processing_status': '2'},
                {'filename': 'plain.json', 'attachment_type': 'SOMETHING_NEW'},
            ],
            'mutators': [{'kind': {'mutator_int': {'value': 3}}}],
        },
    }

    normalized = model.normalize(raw)

    assert normalized['play_element']['description'] == 'wrapped'
    assert normalized['play_element']['publish_state_type'] == PublishState.PUBLISHED

    script, other = normalized['play_element_design']['attachments']
    assert script['filename'] == 'Script.ts'
    assert script['attachment_type'] == AttachmentType.SCRIPT
    assert script['processing_status'] == 2
    assert other['filename'] == 'plain.json'
    assert other['attachment_type'] == 'SOMETHING_NEW'

    # Wrappers outside the known string fields are kept.
    assert normalized['play_element_design']['mutators'][0]['kind'] == {'mutator_int': {'value': 3}}

    # The input is untouched.
    assert raw['play_element']['description'] == {'value': 'wrapped'}


def test_coerce():

    assert model.coerce(AttachmentType, 2) == 2
    assert model.coerce(AttachmentType, '4') == 4
    assert model.coerce(AttachmentType, 'strings') == 4
    assert model.coerce(AttachmentType, 'ATTACHMENT_TYPE_SPATIAL', 'ATTACHMENT_TYPE_') == 1
    assert model.coerce(AttachmentType, None) is None
    assert model.coerce(AttachmentType, True) is True


def test_accessors():

    attachment = {'filename': {'value': 'a.ts'}, 'metadata': 'mapIdx=3', 'attachment_type': 'SCRIPT'}

    assert model.filename(attachment) == 'a.ts'
    assert model.metadata(attachment) == 'mapIdx=3'
    assert model.attachment_type(attachment) == AttachmentType.SCRIPT

    assert model.attachments(None) == []
    assert model.attachments({'attachments': None}) == []


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
