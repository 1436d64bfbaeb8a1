""" Locations and connection defaults. Every value here can be overridden by
    an environment variable, or by passing an explicit argument to whatever
    consumes it; nothing in this module is read from disk.
"""

import os


DEFAULT_HOST = 'santiago-prod-wgw-envoy.ops.dice.se'
DEFAULT_TENANCY = 'prod_default-prod_default-santiago-common'
SCHEMA_FILENAME = 'battlefield_portal.desc'


def directory():
    """ Return the directory holding local files such as the compiled schema:
        ``$PLAYWEB_HOME`` if set, otherwise ``.playweb`` in the user's home
        directory. The environment is consulted on every call.
    """

    found = os.environ.get('PLAYWEB_HOME')
    if found:
        return os.path.expanduser(found)

    home = os.path.expanduser('~')
    if home == '~':
        raise RuntimeError('neither PLAYWEB_HOME nor a home directory is available')

    return os.path.join(home, '.playweb')



def host():
    """ Return the gateway host name, ``$PLAYWEB_HOST`` if set.
    """

    return os.environ.get('PLAYWEB_HOST', DEFAULT_HOST)



def tenancy():
    return os.environ.get('PLAYWEB_TENANCY', DEFAULT_TENANCY)



def session():
    """ Return the portal session identifier from ``$BF_PORTAL_SESSION_ID``.
        The identifier is the value of the ``x-gateway-session-id`` header a
        logged-in browser sends; there is no default.
    """

    try:
        return os.environ['BF_PORTAL_SESSION_ID']
    except KeyError:
        raise RuntimeError('BF_PORTAL_SESSION_ID is not set, no session to authenticate with')



def schema():
    """ Return the path to the compiled descriptor set: ``$PLAYWEB_SCHEMA`` if
        set, otherwise a file of the standard name in :func:`directory`.
    """

    try:
        return os.environ['PLAYWEB_SCHEMA']
    except KeyError:
        return os.path.join(directory(), SCHEMA_FILENAME)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
