""" Human-readable views of a decoded play element document, for inspecting
    what the service returned after an update.
"""

from .document import (
    AttachmentType,
    ProcessingStatus,
    PublishState,
    attachment_type,
    attachments,
    filename,
)


def summarize(document):
    """ Return a multi-line summary of *document*.
    """

    lines = list()
    lines.append('=== PlayElementResponse Summary ===')
    lines.append('')

    element = document.get('play_element')
    if element:
        lines.append('PlayElement:')
        lines.append(f"  ID: {_show(element.get('id'))}")
        lines.append(f"  Name: {_show(element.get('name'))}")
        lines.append(f"  Design ID: {_show(element.get('design_id'))}")
        lines.append(f"  Description: {_show(element.get('description'))}")
        lines.append(f"  Publish State: {element.get('publish_state_type') or 0}")
        lines.append(f"  Short Code: {_show(element.get('short_code'))}")
        lines.append(f"  Thumbnail URL: {_show(element.get('thumbnail_url'))}")

        creator = element.get('creator') or {}
        if creator.get('player_creator'):
            player = creator['player_creator'].get('player') or {}
            lines.append(f"  Creator: Player (nucleus_id: {player.get('nucleus_id', '?')})")
        elif creator.get('internal_creator'):
            lines.append('  Creator: Internal')
        elif creator.get('trusted_creator'):
            lines.append('  Creator: Trusted Player')

    lines.append('')

    design = document.get('play_element_design')
    if design:
        lines.append('PlayElementDesign:')
        lines.append(f"  Design ID: {_show(design.get('design_id'))}")
        lines.append(f"  Design Name: {_show(design.get('design_name'))}")

        found = attachments(design)
        lines.append(f"  Attachments: {len(found)}")
        for index,attachment in enumerate(found):
            lines.append(f"    [{index}] Type: {_show(attachment.get('attachment_type'), '?')}, ID: {_show(attachment.get('id'), '?')}")

            data = attachment.get('attachment_data') or {}
            if data.get('original'):
                lines.append(f"        Original size: {len(data['original'])} bytes")
            if data.get('compiled'):
                lines.append(f"        Compiled size: {len(data['compiled'])} bytes")
            if attachment.get('errors'):
                lines.append(f"        Errors: {', '.join(attachment['errors'])}")

        lines.append(f"  Mutators: {len(design.get('mutators') or ())}")
        lines.append(f"  Asset Categories: {len(design.get('asset_categories') or ())}")

        rules = ((design.get('mod_rules') or {}).get('compatible_rules') or {}).get('original')
        if rules:
            lines.append(f"  Mod Rules (compatible): {len(rules)} bytes")

        rotation = design.get('map_rotation')
        if rotation:
            lines.append(f"  Map Rotation: {len(rotation.get('maps') or ())} maps")

    return '\n'.join(lines)


def _show(value, missing='<none>'):
    if value is None or value == '':
        return missing
    return value



def extract_script(document):
    """ Return the source of the first script attachment, or None.
    """

    for attachment in attachments(document.get('play_element_design')):
        if attachment_type(attachment) != AttachmentType.SCRIPT:
            continue

        original = (attachment.get('attachment_data') or {}).get('original')
        if not original:
            return None
        return bytes(original).decode('utf-8')

    return None



def has_compilation_errors(document):
    element = document.get('play_element') or {}
    if element.get('publish_state_type') == PublishState.ERROR:
        return True

    for attachment in attachments(document.get('play_element_design')):
        if attachment.get('processing_status') == ProcessingStatus.ERROR:
            return True
        if attachment.get('errors'):
            return True

    return False



def get_compilation_errors(document):
    """ Return a list of ``{'attachment': name, 'errors': [...]}`` entries,
        one per attachment reporting errors.
    """

    result = list()
    for attachment in attachments(document.get('play_element_design')):
        errors = attachment.get('errors')
        if errors:
            result.append({
                'attachment': filename(attachment) or attachment.get('id') or 'unknown',
                'errors': list(errors),
            })

    return result


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
