"""Asynchronous gRPC-Web client for the portal WebPlay service.

Every RPC is a single POST carrying one framed message; see
:mod:`playweb.transport.framing`. The schema catalog is loaded on first use
(:func:`playweb.protocol.schema.load`) unless one is supplied.

Updating a play element is not a single call. The service's update only
adds or replaces attachments, so :meth:`WebPlayClient.update_play_element`
reconciles the new design against the server's current one first:

1. both the element and the design are required
2. the current document is fetched, unless the caller already has it
3. attachments present now but absent from the new design are collected
4. those are deleted in a separate call, which must succeed
5. error lists on the new attachments are cleared, and an element stuck in
   the ERROR publish state goes back to DRAFT
6. binary fields are converted to :class:`bytes`
7. the update is encoded, submitted and its response decoded
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import httpx

from . import framing
from .base import ReconciliationError, SchemaError, TransportHTTPError
from .. import config
from ..clone import canonical
from ..document import PublishState, attachments, filename, normalize
from ..errors import MissingSubstructureError, PlayWebError
from ..modifier import PlayElementModifier
from ..protocol import fields, schema, wire


logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class WebPlayClient:
    """ Client for one session against one gateway. Arguments left as None
        are taken from :mod:`playweb.config`. An :class:`httpx.AsyncClient`
        may be supplied as *http*; it is then left open by :meth:`aclose`.
    """

    def __init__(self, session_id: Optional[str] = None, host: Optional[str] = None,
                 tenancy: Optional[str] = None, catalog: Optional[schema.SchemaCatalog] = None,
                 http: Optional[httpx.AsyncClient] = None):

        if session_id is None:
            session_id = config.session()
        if host is None:
            host = config.host()
        if tenancy is None:
            tenancy = config.tenancy()

        self.session_id = session_id
        self.host = host
        self.tenancy = tenancy
        self.catalog = catalog

        if http is None:
            self.http = httpx.AsyncClient()
            self._owns_http = True
        else:
            self.http = http
            self._owns_http = False


    async def __aenter__(self) -> 'WebPlayClient':
        return self


    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()


    def headers(self) -> Dict[str, str]:
        return {
            'content-type': fields.CONTENT_TYPE,
            'x-dice-tenancy': self.tenancy,
            'x-gateway-session-id': self.session_id,
            'x-grpc-web': '1',
            'origin': fields.PORTAL_ORIGIN,
            'referer': fields.PORTAL_ORIGIN + '/',
        }


    def url(self, method: str) -> str:
        return f"https://{self.host}/{fields.SERVICE}/{method}"


    async def schema(self) -> schema.SchemaCatalog:
        if self.catalog is None:
            self.catalog = await schema.load()
        return self.catalog


    async def invoke(self, method: str, payload: bytes) -> bytes:
        """ Send one framed *payload* to *method* and return the message
            carried by the response.
        """

        frame = framing.encode(payload)
        logger.debug("POST %s: body %d bytes (frame %d bytes)", method, len(payload), len(frame))

        response = await self.http.post(self.url(method), headers=self.headers(), content=frame)
        logger.debug("Response status: %d %s", response.status_code, response.reason_phrase)

        if not response.is_success:
            body = response.text
            logger.debug("Error body: %s", body)
            raise TransportHTTPError(response.status_code, response.reason_phrase, body)

        data = response.content
        logger.debug("Response frame size: %d bytes", len(data))

        return framing.decode(data, response.headers)


    async def encode(self, name: str, obj: Mapping[str, Any]) -> bytes:
        message_type = (await self.schema()).lookup(name)

        error = message_type.verify(obj)
        if error:
            short = name.rsplit('.', 1)[-1]
            raise SchemaError(f"Invalid {short}: {error}")

        return message_type.encode(obj)


    async def decode(self, data: bytes) -> Document:
        """ Decode a ``PlayElementResponse`` into a normalized document.
        """

        message_type = (await self.schema()).lookup(fields.PLAY_ELEMENT_RESPONSE)
        message = message_type.decode(data)
        return normalize(message_type.to_plain(message, fields.DECODE_OPTIONS))


    async def get_play_element(self, id: str, include_denied: bool = False) -> bytes:
        """ Fetch a play element and return the undecoded response message.
        """

        payload = wire.encode_get_request(id, include_denied)
        message = await self.invoke(fields.GET_PLAY_ELEMENT, payload)

        logger.debug("%s response size: %d bytes", fields.GET_PLAY_ELEMENT, len(message))
        return message


    async def get_play_element_decoded(self, id: str, include_denied: bool = False) -> Document:
        message = await self.get_play_element(id, include_denied)
        return await self.decode(message)


    async def delete_attachments(self, design_id: str, attachment_ids: Iterable[str]) -> None:
        attachment_ids = list(attachment_ids)
        if not attachment_ids:
            return

        request = {
            'play_element_design_id': design_id,
            'attachment_ids': attachment_ids,
        }

        payload = await self.encode(fields.DELETE_ATTACHMENTS_REQUEST, request)

        logger.debug("Deleting %d attachment(s) from design %s", len(attachment_ids), design_id)
        await self.invoke(fields.DELETE_ATTACHMENTS, payload)


    async def update_play_element(self, id: str, play_element: Document, play_element_design: Document,
                                  current: Optional[Document] = None) -> Document:
        """ Submit *play_element* and *play_element_design* as the new state
            of play element *id*, and return the decoded response. *current*
            is the server's present state, if the caller already has it.
            Neither argument is modified.
        """

        if play_element is None or play_element_design is None:
            raise MissingSubstructureError('both play_element and play_element_design are required for update')

        element = normalize(play_element)
        design = normalize(play_element_design)

        if current is None:
            current = await self.get_play_element_decoded(id, include_denied=True)
        else:
            current = normalize(current)

        await self._reconcile(current, design)

        element, design = _recover(element, design)

        raw, decoded = await self._submit(id, element, design)
        return decoded


    async def _reconcile(self, current, design):
        keep = set()
        for attachment in attachments(design):
            if attachment.get('id'):
                keep.add(attachment['id'])

        stale = list()
        for attachment in attachments(current.get('play_element_design')):
            attachment_id = attachment.get('id')
            if attachment_id and attachment_id not in keep:
                stale.append(attachment_id)
                logger.debug("Marking attachment for deletion: %s (%s)",
                             filename(attachment) or attachment_id, attachment_id)

        if not stale:
            return

        design_id = (current.get('play_element_design') or {}).get('design_id')
        if not design_id:
            logger.warning("Current design has no design_id; not deleting %d stale attachment(s)", len(stale))
            return

        try:
            await self.delete_attachments(design_id, stale)
        except (PlayWebError, httpx.HTTPError) as e:
            raise ReconciliationError(design_id, stale) from e


    async def update_play_element_raw(self, id: str, play_element: Document,
                                      play_element_design: Document) -> Tuple[bytes, Document]:
        """ Submit an update as-is, with no reconciliation or error recovery,
            and return the raw response message alongside the decoded one.
            Intended for debugging.
        """

        if play_element is None or play_element_design is None:
            raise MissingSubstructureError('both play_element and play_element_design are required for update')

        return await self._submit(id, normalize(play_element), normalize(play_element_design))


    async def _submit(self, id, element, design):
        request = _update_request(id, element, design)
        payload = await self.encode(fields.UPDATE_PLAY_ELEMENT_REQUEST, request)

        raw = await self.invoke(fields.UPDATE_PLAY_ELEMENT, payload)
        return raw, await self.decode(raw)


    async def update_play_element_from_modifier(self, id: str, modifier: PlayElementModifier) -> Document:
        built = modifier.build()
        return await self.update_play_element(id, built['play_element'], built['play_element_design'])


    async def update_play_element_script(self, id: str, script: str, include_denied: bool = False) -> Document:
        """ Replace the TypeScript source of play element *id*.
        """

        current = await self.get_play_element_decoded(id, include_denied)
        built = PlayElementModifier(current).set_script_payload(script).build()

        return await self.update_play_element(id, built['play_element'], built['play_element_design'],
                                              current=current)

# end of class WebPlayClient



def _recover(element, design):
    """ Return copies of *element* and *design* with attachment errors cleared.
        If any attachment had errors and the element is in the ERROR publish
        state it is returned in the DRAFT state instead.
    """

    cleared = False
    recovered = list()

    for attachment in attachments(design):
        if attachment is None:
            continue
        if attachment.get('errors'):
            logger.debug("Clearing errors from attachment: %s", filename(attachment) or attachment.get('id'))
            attachment = dict(attachment)
            attachment['errors'] = []
            cleared = True
        recovered.append(attachment)

    design = dict(design)
    design['attachments'] = recovered

    if cleared and element.get('publish_state_type') == PublishState.ERROR:
        logger.debug("Resetting publish state from ERROR to DRAFT")
        element = dict(element)
        element['publish_state_type'] = int(PublishState.DRAFT)

    return element, design



def _update_request(id, element, design):
    mod_rules = design.get('mod_rules') or {}
    compatible = mod_rules.get('compatible_rules') or {}

    request = {
        'id': element.get('id') or id,
        'name': element.get('name') or '',
        'description': element.get('description'),
        'design_metadata': design.get('design_metadata'),
        'map_rotation': design.get('map_rotation'),
        'mutators': [mutator for mutator in design.get('mutators') or () if mutator],
        'asset_categories': [category for category in design.get('asset_categories') or () if category],
        'original_mod_rules': compatible.get('original') or b'',
        'play_element_settings': element.get('play_element_settings'),
        'publish_state': element.get('publish_state_type') or 0,
        'mod_level_data_id': design.get('mod_level_data_id'),
        'thumbnail_url': element.get('thumbnail_url'),
        'attachments': [attachment for attachment in design.get('attachments') or () if attachment],
    }

    return canonical(request)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
