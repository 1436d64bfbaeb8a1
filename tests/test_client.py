import asyncio
import struct
import httpx
import pytest

import playweb
from playweb.protocol import fields, wire
from playweb.transport import framing
from playweb.transport.base import ReconciliationError, RpcError, SchemaError, TransportHTTPError
from playweb.transport.client import WebPlayClient


HOST = 'gateway.example.com'
SERVICE = '/santiago.web.play.WebPlay/'


def ok_trailer():
    text = b'grpc-status: 0\r\ngrpc-message: OK\r\n'
    return b'\x80' + struct.pack('>I', len(text)) + text


class Service:
    """ Stand-in for the gateway. Requests are recorded, decoded with the
        catalog, and answered from *current*.
    """

    def __init__(self, catalog, current, delete_status='0'):
        self.catalog = catalog
        self.current = current
        self.delete_status = delete_status
        self.calls = list()
        self.requests = list()


    def message(self, name, request):
        message_type = self.catalog.lookup(name)
        payload = framing.decode(request.content)
        return message_type.to_plain(message_type.decode(payload))


    def respond(self, document):
        encoded = self.catalog.lookup(fields.PLAY_ELEMENT_RESPONSE).encode(document)
        return httpx.Response(200, content=framing.encode(encoded) + ok_trailer())


    def __call__(self, request):
        method = request.url.path[len(SERVICE):]
        self.calls.append(method)
        self.requests.append(request)

        if method == fields.GET_PLAY_ELEMENT:
            return self.respond(self.current)

        if method == fields.DELETE_ATTACHMENTS:
            self.deleted = self.message(fields.DELETE_ATTACHMENTS_REQUEST, request)
            if self.delete_status != '0':
                headers = {'grpc-status': self.delete_status, 'grpc-message': 'permission denied'}
                return httpx.Response(200, content=b'', headers=headers)
            return httpx.Response(200, content=framing.encode(b'') + ok_trailer())

        if method == fields.UPDATE_PLAY_ELEMENT:
            self.updated = self.message(fields.UPDATE_PLAY_ELEMENT_REQUEST, request)
            return self.respond(self.current)

        return httpx.Response(404, text='no such method')

# end of class Service



def run(service, scenario):

    async def wrapper():
        async with httpx.AsyncClient(transport=httpx.MockTransport(service)) as http:
            client = WebPlayClient('session-1', HOST, 'tenancy-1', catalog=service.catalog, http=http)
            async with client:
                return await scenario(client)

    return asyncio.run(wrapper())



def test_headers_and_url(catalog, document):

    client = WebPlayClient('session-1', HOST, 'tenancy-1', catalog=catalog, http=httpx.AsyncClient())

    assert client.url('getPlayElement') == 'https://gateway.example.com/santiago.web.play.WebPlay/getPlayElement'

    headers = client.headers()
    assert headers['content-type'] == 'application/grpc-web+proto'
    assert headers['x-dice-tenancy'] == 'tenancy-1'
    assert headers['x-gateway-session-id'] == 'session-1'
    assert headers['x-grpc-web'] == '1'
    assert headers['origin'] == 'https://portal.battlefield.com'
    assert headers['referer'] == 'https://portal.battlefield.com/'

    asyncio.run(client.http.aclose())


def test_defaults_from_environment(monkeypatch):

    monkeypatch.setenv('BF_PORTAL_SESSION_ID', 'from-environment')
    monkeypatch.delenv('PLAYWEB_HOST', raising=False)
    monkeypatch.delenv('PLAYWEB_TENANCY', raising=False)

    client = WebPlayClient(http=httpx.AsyncClient())
    assert client.session_id == 'from-environment'
    assert client.host == playweb.config.DEFAULT_HOST
    assert client.tenancy == playweb.config.DEFAULT_TENANCY

    asyncio.run(client.http.aclose())


def test_get_play_element(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        return await client.get_play_element_decoded('pe-1', include_denied=True)

    fetched = run(service, scenario)

    request = service.requests[0]
    assert request.method == 'POST'
    assert request.headers['x-gateway-session-id'] == 'session-1'
    assert framing.decode(request.content) == wire.encode_get_request('pe-1', True)

    assert fetched['play_element']['name'] == 'Original'
    assert fetched['play_element']['description'] == 'An experience'
    assert fetched['play_element']['created'] == '0'

    script = fetched['play_element_design']['attachments'][0]
    assert script['filename'] == 'Script.ts'
    assert script['attachment_type'] == playweb.AttachmentType.SCRIPT
    assert script['attachment_data']['original'] == b'console.log(1);'


def test_reconciliation(catalog, document):

    service = Service(catalog, document)

    element = document['play_element']
    design = dict(document['play_element_design'])
    design['attachments'] = [document['play_element_design']['attachments'][1]]

    async def scenario(client):
        return await client.update_play_element('pe-1', element, design)

    updated = run(service, scenario)

    assert service.calls == [fields.GET_PLAY_ELEMENT, fields.DELETE_ATTACHMENTS, fields.UPDATE_PLAY_ELEMENT]
    assert framing.decode(service.requests[0].content) == wire.encode_get_request('pe-1', True)

    assert service.deleted['play_element_design_id'] == 'd-1'
    assert service.deleted['attachment_ids'] == ['A', 'C']

    assert [attachment['id'] for attachment in service.updated['attachments']] == ['B']
    assert service.updated['id'] == 'pe-1'
    assert service.updated['name'] == 'Original'

    assert updated['play_element']['id'] == 'pe-1'


def test_nothing_to_delete(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        await client.update_play_element('pe-1', document['play_element'], document['play_element_design'],
                                         current=document)

    run(service, scenario)

    # The current state was supplied, and every attachment is kept.
    assert service.calls == [fields.UPDATE_PLAY_ELEMENT]


def test_deletion_failure_aborts_update(catalog, document):

    service = Service(catalog, document, delete_status='7')

    design = dict(document['play_element_design'])
    design['attachments'] = []

    async def scenario(client):
        with pytest.raises(ReconciliationError) as caught:
            await client.update_play_element('pe-1', document['play_element'], design, current=document)
        return caught.value

    error = run(service, scenario)

    assert service.calls == [fields.DELETE_ATTACHMENTS]
    assert error.design_id == 'd-1'
    assert error.attachment_ids == ['A', 'B', 'C']
    assert isinstance(error.__cause__, RpcError)
    assert error.__cause__.code == '7'


def test_error_recovery(catalog, document):

    service = Service(catalog, document)

    element = dict(document['play_element'])
    element['publish_state_type'] = int(playweb.PublishState.ERROR)

    design = playweb.clone.clone(document['play_element_design'])
    design['attachments'][0]['errors'] = ['Script.ts(1,1): error TS1005']

    async def scenario(client):
        await client.update_play_element('pe-1', element, design, current=document)

    run(service, scenario)

    assert service.updated['publish_state'] == playweb.PublishState.DRAFT
    for attachment in service.updated['attachments']:
        assert attachment['errors'] == []

    # The caller's documents are untouched.
    assert element['publish_state_type'] == playweb.PublishState.ERROR
    assert design['attachments'][0]['errors'] == ['Script.ts(1,1): error TS1005']


def test_error_state_kept_without_errors(catalog, document):

    service = Service(catalog, document)

    element = dict(document['play_element'])
    element['publish_state_type'] = int(playweb.PublishState.ERROR)

    async def scenario(client):
        await client.update_play_element('pe-1', element, document['play_element_design'], current=document)

    run(service, scenario)

    assert service.updated['publish_state'] == playweb.PublishState.ERROR


def test_update_requires_both_halves(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        with pytest.raises(playweb.errors.MissingSubstructureError):
            await client.update_play_element('pe-1', None, document['play_element_design'])
        with pytest.raises(playweb.errors.MissingSubstructureError):
            await client.update_play_element('pe-1', document['play_element'], None)

    run(service, scenario)
    assert service.calls == []


def test_update_from_modifier(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        modifier = playweb.PlayElementModifier(document).set_name('Modified')
        return await client.update_play_element_from_modifier('pe-1', modifier)

    run(service, scenario)

    assert service.calls == [fields.GET_PLAY_ELEMENT, fields.UPDATE_PLAY_ELEMENT]
    assert service.updated['name'] == 'Modified'


def test_update_script(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        return await client.update_play_element_script('pe-1', 'replaced();')

    run(service, scenario)

    assert service.calls == [fields.GET_PLAY_ELEMENT, fields.UPDATE_PLAY_ELEMENT]

    script = service.updated['attachments'][0]
    assert script['attachment_data']['original'] == b'replaced();'
    assert script['attachment_data']['compiled'] == b''
    assert script['processing_status'] == playweb.ProcessingStatus.PENDING


def test_update_raw(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        return await client.update_play_element_raw('pe-1', document['play_element'], {'attachments': []})

    raw, decoded = run(service, scenario)

    assert service.calls == [fields.UPDATE_PLAY_ELEMENT]
    assert isinstance(raw, bytes)
    assert decoded['play_element']['name'] == 'Original'


def test_invalid_request(catalog, document):

    service = Service(catalog, document)

    element = dict(document['play_element'])
    element['name'] = 42

    async def scenario(client):
        with pytest.raises(SchemaError) as caught:
            await client.update_play_element('pe-1', element, document['play_element_design'], current=document)
        return caught.value

    error = run(service, scenario)

    assert str(error) == 'Invalid UpdatePlayElementRequest: UpdatePlayElementRequest.name: string expected'
    assert service.calls == []


def test_http_failure(catalog, document):

    def handler(request):
        return httpx.Response(401, text='session expired')

    service = Service(catalog, document)

    async def scenario(client):
        client.http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        try:
            with pytest.raises(TransportHTTPError) as caught:
                await client.get_play_element('pe-1')
        finally:
            await client.http.aclose()
        return caught.value

    error = run(service, scenario)

    assert error.status == 401
    assert error.reason == 'Unauthorized'
    assert error.body == 'session expired'


def test_empty_delete(catalog, document):

    service = Service(catalog, document)

    async def scenario(client):
        await client.delete_attachments('d-1', [])

    run(service, scenario)
    assert service.calls == []


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
