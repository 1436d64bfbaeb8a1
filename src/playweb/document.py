""" The canonical in-memory shape of a play element document.

    A document is a dictionary with two substructures, ``play_element`` (the
    identity and presentation metadata) and ``play_element_design`` (the
    attachments, map rotation, rules and restrictions). Keys are the schema's
    field names. Anything not named here is carried along untouched.

    :func:`normalize` is applied once at the boundary, to every decoded
    response and to every caller-built document handed to the client, so the
    rest of the package only ever sees one representation of each field.
"""

import enum


class PublishState(enum.IntEnum):
    INVALID = 0
    DRAFT = 1
    PUBLISHED = 2
    ARCHIVED = 3
    ERROR = 4


class ModerationState(enum.IntEnum):
    UNDEFINED = 0
    IN_REVIEW = 1
    APPROVED = 2
    DENIED = 3


class AttachmentType(enum.IntEnum):
    UNSPECIFIED = 0
    SPATIAL = 1         # JSON spatial data for one map
    SCRIPT = 2          # TypeScript source, e.g. Script.ts
    SCRIPT_DATA = 3
    STRINGS = 4         # Localization, e.g. Strings.json
    MP_DATA = 5


class ProcessingStatus(enum.IntEnum):
    UNSPECIFIED = 0
    PENDING = 1
    PROCESSED = 2
    NEEDS_RECOMPILE = 3
    ERROR = 4


class AttachmentCompileStatus(enum.IntEnum):
    UNSPECIFIED = 0
    OK = 1
    ERROR = 2
    INCOMPATIBLE_VERSION = 3


class BalancingMethod(enum.IntEnum):
    NONE = 0
    SKILL = 1
    SQUAD = 2


class RotationBehavior(enum.IntEnum):
    LOOP = 0
    EORMM = 1           # End of round map vote
    ONE_MAP = 2


class CapacityType(enum.IntEnum):
    UNSPECIFIED = 0
    FILL = 1
    FIXED = 2


class Toggle(enum.IntEnum):
    """ Tri-state used by the joinability settings.
    """

    UNSPECIFIED = 0
    ENABLED = 1
    DISABLED = 2


# String fields the service declares as wrapper messages. Documents carry
# them as plain strings.

WRAPPED_STRINGS = frozenset((
    'filename',
    'metadata',
    'description',
    'thumbnail_url',
    'short_code',
    'mod_level_data_id',
    'secret',
    'progression_mode',
))

_ENUM_FIELDS = {
    'attachment_type': (AttachmentType, 'ATTACHMENT_TYPE_'),
    'processing_status': (ProcessingStatus, 'PROCESSING_STATUS_'),
    'publish_state_type': (PublishState, 'PUBLISH_STATE_'),
    'publish_state': (PublishState, 'PUBLISH_STATE_'),
    'moderation_state': (ModerationState, 'MODERATION_STATE_'),
    'attachment_compile_status': (AttachmentCompileStatus, 'ATTACHMENT_COMPILE_STATUS_'),
}


def normalize(document):
    """ Return *document* in canonical form. Containers are rebuilt, leaves
        are shared, and the input is not modified.
    """

    if isinstance(document, dict):
        normalized = dict()
        for key,value in document.items():
            if key in WRAPPED_STRINGS:
                value = unwrap(normalize(value))
            elif key in _ENUM_FIELDS:
                cls, prefix = _ENUM_FIELDS[key]
                value = coerce(cls, value, prefix)
            else:
                value = normalize(value)
            normalized[key] = value
        return normalized

    if isinstance(document, list):
        return [normalize(element) for element in document]

    return document



def unwrap(value):
    """ Collapse a ``{'value': x}`` string wrapper to ``x``.
    """

    if isinstance(value, dict) and isinstance(value.get('value'), str):
        return value['value']
    return value



def coerce(cls, value, prefix=''):
    """ Convert *value*, given as an integer, a digit string, or a member
        name with or without *prefix*, to the integer value of an enumeration
        member. Values that cannot be interpreted are returned unchanged.
    """

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return int(value)

    if isinstance(value, str):
        name = value.strip()
        if name.isdigit():
            return int(name)

        name = name.upper()
        if prefix and name.startswith(prefix):
            name = name[len(prefix):]

        try:
            return int(cls[name])
        except KeyError:
            return value

    return value



def attachments(design):
    if not design:
        return []
    return design.get('attachments') or []


def attachment_type(attachment):
    return coerce(AttachmentType, attachment.get('attachment_type'), 'ATTACHMENT_TYPE_')


def filename(attachment):
    return unwrap(attachment.get('filename'))


def metadata(attachment):
    return unwrap(attachment.get('metadata'))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
