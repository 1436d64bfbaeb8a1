import pytest

from google.protobuf import descriptor_pb2

import playweb


FieldProto = descriptor_pb2.FieldDescriptorProto

OPTIONAL = FieldProto.LABEL_OPTIONAL
REPEATED = FieldProto.LABEL_REPEATED

STRING = FieldProto.TYPE_STRING
BYTES = FieldProto.TYPE_BYTES
BOOL = FieldProto.TYPE_BOOL
INT32 = FieldProto.TYPE_INT32
INT64 = FieldProto.TYPE_INT64
FLOAT = FieldProto.TYPE_FLOAT
ENUM = FieldProto.TYPE_ENUM
MESSAGE = FieldProto.TYPE_MESSAGE


def add_enum(file, name, prefix, members):
    enum = file.enum_type.add()
    enum.name = name
    for number,member in enumerate(members):
        value = enum.value.add()
        value.name = prefix + member
        value.number = number


def add_message(file, name, *fields, oneof=None):
    """ Append a message to *file*. Each field is a tuple of name, number,
        type, and optionally the label and the referenced type name. Fields
        listed in *oneof* (a name, field names pair) share one oneof.
    """

    message = file.message_type.add()
    message.name = name

    if oneof is not None:
        oneof_name, members = oneof
        message.oneof_decl.add().name = oneof_name
    else:
        members = ()

    for entry in fields:
        field_name, number, kind = entry[:3]
        label = entry[3] if len(entry) > 3 else OPTIONAL
        type_name = entry[4] if len(entry) > 4 else None

        field = message.field.add()
        field.name = field_name
        field.number = number
        field.type = kind
        field.label = label
        if type_name is not None:
            field.type_name = '.battlefield.portal.' + type_name
        if field_name in members:
            field.oneof_index = 0

    return message


def portal_descriptors():
    """ A cut-down rendition of the portal schema: enough of the play element
        messages to exercise the catalog, the client and its reconciliation.
    """

    file = descriptor_pb2.FileDescriptorProto()
    file.name = 'portal_test.proto'
    file.package = 'battlefield.portal'
    file.syntax = 'proto3'

    add_enum(file, 'PublishStateType', 'PUBLISH_STATE_',
             ('INVALID', 'DRAFT', 'PUBLISHED', 'ARCHIVED', 'ERROR'))
    add_enum(file, 'AttachmentType', 'ATTACHMENT_TYPE_',
             ('UNSPECIFIED', 'SPATIAL', 'SCRIPT', 'SCRIPT_DATA', 'STRINGS', 'MP_DATA'))
    add_enum(file, 'ProcessingStatus', 'PROCESSING_STATUS_',
             ('UNSPECIFIED', 'PENDING', 'PROCESSED', 'NEEDS_RECOMPILE', 'ERROR'))

    add_message(file, 'StringValue', ('value', 1, STRING))

    add_message(file, 'AttachmentData',
                ('original', 1, BYTES),
                ('compiled', 2, BYTES))

    add_message(file, 'Attachment',
                ('id', 1, STRING),
                ('version', 2, STRING),
                ('filename', 3, MESSAGE, OPTIONAL, 'StringValue'),
                ('metadata', 4, MESSAGE, OPTIONAL, 'StringValue'),
                ('is_processable', 5, BOOL),
                ('processing_status', 6, ENUM, OPTIONAL, 'ProcessingStatus'),
                ('attachment_data', 7, MESSAGE, OPTIONAL, 'AttachmentData'),
                ('attachment_type', 8, ENUM, OPTIONAL, 'AttachmentType'),
                ('errors', 9, STRING, REPEATED))

    add_message(file, 'MutatorBoolean', ('value', 1, BOOL))
    add_message(file, 'MutatorInt', ('value', 1, INT32))
    add_message(file, 'MutatorFloat', ('value', 1, FLOAT))
    add_message(file, 'SparseInt', ('index', 1, INT32), ('value', 2, INT32))
    add_message(file, 'MutatorSparseInt',
                ('default_value', 1, INT32),
                ('size', 2, INT32),
                ('sparse_values', 3, MESSAGE, REPEATED, 'SparseInt'))

    add_message(file, 'MutatorKind',
                ('mutator_boolean', 1, MESSAGE, OPTIONAL, 'MutatorBoolean'),
                ('mutator_int', 2, MESSAGE, OPTIONAL, 'MutatorInt'),
                ('mutator_float', 3, MESSAGE, OPTIONAL, 'MutatorFloat'),
                ('mutator_sparse_int', 4, MESSAGE, OPTIONAL, 'MutatorSparseInt'),
                oneof=('kind', ('mutator_boolean', 'mutator_int', 'mutator_float', 'mutator_sparse_int')))

    add_message(file, 'Mutator',
                ('name', 1, STRING),
                ('category', 2, STRING),
                ('id', 3, STRING),
                ('kind', 4, MESSAGE, OPTIONAL, 'MutatorKind'))

    add_message(file, 'Team',
                ('team_id', 1, INT32),
                ('capacity', 2, INT32),
                ('capacity_type', 3, INT32))

    add_message(file, 'TeamComposition',
                ('teams', 1, MESSAGE, REPEATED, 'Team'),
                ('internal_teams', 2, MESSAGE, REPEATED, 'Team'),
                ('balancing_method', 3, INT32))

    add_message(file, 'RotationMap',
                ('level_name', 1, STRING),
                ('level_location', 2, STRING),
                ('rounds', 3, INT32),
                ('allowed_spectators', 4, INT32),
                ('team_composition', 5, MESSAGE, OPTIONAL, 'TeamComposition'),
                ('mutators', 6, MESSAGE, REPEATED, 'Mutator'))

    add_message(file, 'RotationAttributes', ('rotation_behavior', 1, INT32))

    add_message(file, 'MapRotation',
                ('maps', 1, MESSAGE, REPEATED, 'RotationMap'),
                ('attributes', 2, MESSAGE, OPTIONAL, 'RotationAttributes'))

    add_message(file, 'PlayElement',
                ('id', 1, STRING),
                ('name', 2, STRING),
                ('description', 3, MESSAGE, OPTIONAL, 'StringValue'),
                ('publish_state_type', 4, ENUM, OPTIONAL, 'PublishStateType'),
                ('design_id', 5, STRING),
                ('thumbnail_url', 6, MESSAGE, OPTIONAL, 'StringValue'),
                ('created', 7, INT64))

    add_message(file, 'PlayElementDesign',
                ('design_id', 1, STRING),
                ('attachments', 2, MESSAGE, REPEATED, 'Attachment'),
                ('map_rotation', 3, MESSAGE, OPTIONAL, 'MapRotation'),
                ('mutators', 4, MESSAGE, REPEATED, 'Mutator'))

    add_message(file, 'PlayElementResponse',
                ('play_element', 1, MESSAGE, OPTIONAL, 'PlayElement'),
                ('play_element_design', 2, MESSAGE, OPTIONAL, 'PlayElementDesign'))

    add_message(file, 'UpdatePlayElementRequest',
                ('id', 1, STRING),
                ('name', 2, STRING),
                ('description', 3, MESSAGE, OPTIONAL, 'StringValue'),
                ('map_rotation', 5, MESSAGE, OPTIONAL, 'MapRotation'),
                ('mutators', 6, MESSAGE, REPEATED, 'Mutator'),
                ('original_mod_rules', 8, BYTES),
                ('publish_state', 10, ENUM, OPTIONAL, 'PublishStateType'),
                ('thumbnail_url', 12, MESSAGE, OPTIONAL, 'StringValue'),
                ('attachments', 13, MESSAGE, REPEATED, 'Attachment'))

    add_message(file, 'DeleteAttachmentsRequest',
                ('play_element_design_id', 1, STRING),
                ('attachment_ids', 2, STRING, REPEATED))

    descriptors = descriptor_pb2.FileDescriptorSet()
    descriptors.file.append(file)
    return descriptors


@pytest.fixture(scope="session")
def descriptor_set():
    return portal_descriptors().SerializeToString()


@pytest.fixture(scope="session")
def catalog(descriptor_set):
    return playweb.protocol.schema.ProtobufCatalog(descriptor_set)


@pytest.fixture
def document():
    """ A fetched play element with one script, one spatial and one strings
        attachment, as the client hands it to callers.
    """

    return {
        'play_element': {
            'id': 'pe-1',
            'name': 'Original',
            'description': 'An experience',
            'publish_state_type': 1,
            'design_id': 'd-1',
        },
        'play_element_design': {
            'design_id': 'd-1',
            'attachments': [
                {
                    'id': 'A',
                    'version': '3',
                    'filename': 'Script.ts',
                    'is_processable': True,
                    'processing_status': 2,
                    'attachment_data': {'original': b'console.log(1);', 'compiled': b'\x00\x01\x02'},
                    'attachment_type': 2,
                    'errors': [],
                },
                {
                    'id': 'B',
                    'version': '1',
                    'filename': 'MP_Battery_map0.spatial.json',
                    'metadata': 'mapIdx=0',
                    'is_processable': True,
                    'processing_status': 2,
                    'attachment_data': {'original': b'{"objects": []}'},
                    'attachment_type': 1,
                    'errors': [],
                },
                {
                    'id': 'C',
                    'version': '2',
                    'filename': 'Strings.json',
                    'is_processable': True,
                    'processing_status': 2,
                    'attachment_data': {'original': b'{"greeting": "hello"}'},
                    'attachment_type': 4,
                    'errors': [],
                },
            ],
            'mutators': [
                {'id': 'm-1', 'name': 'SpottingAllowed', 'kind': {'mutator_boolean': {'value': True}}},
            ],
        },
    }


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
