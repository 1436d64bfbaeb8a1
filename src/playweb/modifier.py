""" Copy-on-write editing of a fetched play element document.

    A :class:`PlayElementModifier` clones the document it is given and applies
    every edit to that private copy; the caller's document is never touched,
    and two modifiers built from the same document are fully independent.
    Every editing method returns the modifier so that calls can be chained::

        modifier = PlayElementModifier(current)
        modifier.set_name('Hardcore').set_script_payload(code)
        update = modifier.build()
"""

from __future__ import annotations

import logging
import uuid

from . import json
from .clone import clone
from .document import (
    AttachmentType,
    ProcessingStatus,
    PublishState,
    RotationBehavior,
    attachment_type,
    coerce,
    filename,
    metadata,
    normalize,
)
from .errors import (
    AttachmentNotFoundError,
    InvalidPayloadError,
    MissingSubstructureError,
)
from .rotation import map_entry


logger = logging.getLogger(__name__)

SCRIPT_EXTENSION = '.ts'
SCRIPT_FILENAME = 'Script.ts'
STRINGS_FILENAME = 'Strings.json'
NEW_VERSION = '1'


class PlayElementModifier:

    def __init__(self, document):
        self._document = clone(normalize(document))


    @property
    def document(self):
        """ The working copy. Changes made through this reference are part of
            what :meth:`build` returns.
        """

        return self._document


    def _element(self):
        try:
            element = self._document['play_element']
        except KeyError:
            element = None

        if element is None:
            element = dict()
            self._document['play_element'] = element

        return element


    def _design(self):
        design = self._document.get('play_element_design')
        if design is None:
            raise MissingSubstructureError('play_element_design is missing from the document')
        return design


    def _attachments(self):
        design = self._design()
        attachments = design.get('attachments')
        if attachments is None:
            attachments = list()
            design['attachments'] = attachments
        return attachments


    def set_name(self, name):
        self._element()['name'] = name
        return self


    def set_description(self, description):
        self._element()['description'] = description
        return self


    def set_thumbnail(self, url):
        self._element()['thumbnail_url'] = url
        return self


    def set_publish_state(self, state):
        state = coerce(PublishState, state, 'PUBLISH_STATE_')
        self._element()['publish_state_type'] = int(PublishState(state))
        return self


    def set_spatial_payload(self, content):
        """ Replace the content of the design's spatial attachment. The
            compiled form is dropped and the attachment is queued for
            processing again.
        """

        for attachment in self._design().get('attachments') or ():
            if attachment_type(attachment) == AttachmentType.SPATIAL:
                break
        else:
            raise AttachmentNotFoundError('no spatial attachment found on the play element')

        _replace_payload(attachment, _encode(content), ProcessingStatus.PENDING)
        return self


    def set_script_payload(self, code):
        """ Replace the TypeScript source of the experience. Only script
            attachments with a ``.ts`` filename are candidates; if there are
            several, the one named ``Script.ts`` wins, and failing that the
            first one in the design.
        """

        candidates = list()
        for attachment in self._design().get('attachments') or ():
            if attachment_type(attachment) != AttachmentType.SCRIPT:
                continue
            name = filename(attachment)
            if isinstance(name, str) and name.lower().endswith(SCRIPT_EXTENSION):
                candidates.append(attachment)

        if not candidates:
            raise AttachmentNotFoundError('no TypeScript attachment (script, .ts file) found on the play element')

        chosen = candidates[0]
        if len(candidates) > 1:
            for attachment in candidates:
                if filename(attachment) == SCRIPT_FILENAME:
                    chosen = attachment
                    break

        _replace_payload(chosen, _encode(code), ProcessingStatus.PENDING)
        return self


    def set_map_rotation(self, maps, rotation_behavior=RotationBehavior.LOOP):
        """ Replace the map rotation. Missing map settings are filled in with
            the defaults in :mod:`playweb.rotation`. A map carrying
            ``spatial_data`` also gets a spatial attachment tagged with its
            position in the rotation, ``mapIdx=<i>``; an attachment already
            tagged for that position is updated in place.
        """

        design = self._design()
        maps = list(maps)

        design['map_rotation'] = {
            'maps': [map_entry(entry) for entry in maps],
            'attributes': {'rotation_behavior': int(RotationBehavior(rotation_behavior))},
        }

        for index,entry in enumerate(maps):
            spatial = entry.get('spatial_data')
            if not spatial:
                continue

            name = entry.get('spatial_filename')
            if not name:
                name = f"{entry['level_name']}_map{index}.spatial.json"

            self._set_spatial_attachment(index, spatial, name)

        return self


    def _set_spatial_attachment(self, index, spatial, name):
        attachments = self._attachments()
        tag = f"mapIdx={index}"

        if isinstance(spatial, (str, bytes, bytearray, memoryview)):
            content = _encode(spatial)
        else:
            content = json.dumps(spatial)

        replacement = {
            'filename': name,
            'is_processable': True,
            'processing_status': int(ProcessingStatus.PENDING),
            'attachment_data': {'original': content},
            'attachment_type': int(AttachmentType.SPATIAL),
            'metadata': tag,
            'errors': [],
        }

        _upsert(attachments, replacement, lambda attachment: (
            attachment_type(attachment) == AttachmentType.SPATIAL and metadata(attachment) == tag))


    def clear_spatial_attachments(self):
        """ Remove every spatial attachment, leaving all others in place.
        """

        design = self._design()
        attachments = design.get('attachments')
        if attachments:
            kept = list()
            for attachment in attachments:
                if attachment_type(attachment) != AttachmentType.SPATIAL:
                    kept.append(attachment)
            design['attachments'] = kept

        return self


    def set_localization_strings(self, data, filename=STRINGS_FILENAME):
        """ Set the localization strings, supplied as JSON text or as an
            object to be serialized. Strings are not compiled by the service,
            so the attachment is marked processed. If the design holds more
            than one strings attachment, the first one is replaced.
        """

        attachments = self._attachments()

        try:
            if isinstance(data, (bytes, bytearray, memoryview)):
                text = bytes(data).decode('utf-8')
            elif isinstance(data, str):
                text = data
            else:
                text = json.dumps_text(data)

            json.loads(text)
        except (UnicodeDecodeError, *json.DecodeError) as e:
            raise InvalidPayloadError(f"{filename} content must be valid JSON: {e}") from e

        replacement = {
            'filename': filename,
            'is_processable': True,
            'processing_status': int(ProcessingStatus.PROCESSED),
            'attachment_data': {'original': text.encode('utf-8')},
            'attachment_type': int(AttachmentType.STRINGS),
            'errors': [],
        }

        _upsert(attachments, replacement, lambda attachment: (
            attachment_type(attachment) == AttachmentType.STRINGS))

        return self


    def set_global_rules(self, mutators):
        """ Merge experience-wide *mutators* into the design by name. A
            mutator replacing an existing one keeps the server-assigned id;
            new names are appended.
        """

        design = self._design()
        current = design.get('mutators')
        if current is None:
            current = list()
            design['mutators'] = current

        for mutator in mutators:
            mutator = clone(mutator)
            for index,existing in enumerate(current):
                if existing.get('name') == mutator.get('name'):
                    if existing.get('id'):
                        mutator['id'] = existing['id']
                    current[index] = mutator
                    break
            else:
                current.append(mutator)

        return self


    def set_asset_categories(self, categories):
        self._design()['asset_categories'] = clone(list(categories))
        return self


    def build(self):
        """ Return the edited document as a dictionary with the keys
            ``play_element`` and ``play_element_design``, the two arguments
            of an update.
        """

        element = self._document.get('play_element')
        design = self._document.get('play_element_design')

        if element is None or design is None:
            raise MissingSubstructureError('document is missing play_element or play_element_design')

        return {
            'play_element': element,
            'play_element_design': design,
        }

# end of class PlayElementModifier



def _encode(content):
    if isinstance(content, str):
        return content.encode('utf-8')
    return bytes(content)


def _replace_payload(attachment, content, status):
    """ Install new *content* on *attachment*. The compiled form is removed
        outright; an empty or null ``compiled`` is not the same thing to the
        service.
    """

    data = attachment.get('attachment_data')
    if data is None:
        data = dict()
        attachment['attachment_data'] = data

    data['original'] = content
    data.pop('compiled', None)
    attachment['processing_status'] = int(status)


def _upsert(attachments, replacement, matches):
    for index,attachment in enumerate(attachments):
        if matches(attachment):
            replacement['id'] = attachment.get('id')
            replacement['version'] = attachment.get('version')
            attachments[index] = replacement
            logger.debug("Updated attachment %s (%s)", replacement['filename'], replacement['id'])
            return

    replacement['id'] = str(uuid.uuid4())
    replacement['version'] = NEW_VERSION
    attachments.append(replacement)
    logger.debug("Added attachment %s (%s)", replacement['filename'], replacement['id'])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
