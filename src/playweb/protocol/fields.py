"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

SERVICE = "santiago.web.play.WebPlay"

# RPC method names, as they appear in the request path.
GET_PLAY_ELEMENT = "getPlayElement"
UPDATE_PLAY_ELEMENT = "updatePlayElement"
DELETE_ATTACHMENTS = "DeleteAttachments"

# Fully-qualified schema message names.
PACKAGE = "battlefield.portal"
PLAY_ELEMENT_RESPONSE = PACKAGE + ".PlayElementResponse"
UPDATE_PLAY_ELEMENT_REQUEST = PACKAGE + ".UpdatePlayElementRequest"
DELETE_ATTACHMENTS_REQUEST = PACKAGE + ".DeleteAttachmentsRequest"

# Conversion options for every decoded document: enumerations stay integers
# and 64-bit integers become strings, so a document survives a round trip
# through the serializer unchanged.
DECODE_OPTIONS = {
    "enums": int,
    "longs": str,
    "defaults": True,
}

CONTENT_TYPE = "application/grpc-web+proto"
PORTAL_ORIGIN = "https://portal.battlefield.com"

STATUS = "grpc-status"
MESSAGE = "grpc-message"


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
