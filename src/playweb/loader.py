""" Experience configurations on disk, and the round trips that move them
    to and from the service.
"""

import logging
import os

from . import json
from .errors import InvalidPayloadError
from .experience import Resolver, apply, export
from .modifier import PlayElementModifier


logger = logging.getLogger(__name__)


def load_config(path):
    """ Read and parse the experience configuration at *path*.
    """

    with open(path, 'rb') as file:
        contents = file.read()

    try:
        return json.loads(contents)
    except json.DecodeError as e:
        raise InvalidPayloadError(f"Invalid JSON in configuration {path}: {e}") from e



class FileResolver(Resolver):
    """ :class:`~playweb.experience.Resolver` that reads file references
        relative to *base*, normally the directory holding the configuration.
    """

    def __init__(self, base):
        self.base = os.path.abspath(base)


    def path(self, reference):
        if os.path.isabs(reference):
            return reference
        return os.path.join(self.base, reference)


    def read(self, reference):
        with open(self.path(reference), 'r', encoding='utf-8') as file:
            return file.read()

# end of class FileResolver



def resolver_for(path):
    return FileResolver(os.path.dirname(os.path.abspath(path)))



def validate(path):
    """ Check the configuration at *path* without applying it. Returns a
        pair of lists, ``(errors, warnings)``; the configuration is usable
        if the first is empty.
    """

    errors = list()
    warnings = list()

    try:
        config = load_config(path)
    except (OSError, InvalidPayloadError) as e:
        errors.append(str(e))
        return errors, warnings

    if not isinstance(config, dict):
        errors.append('Configuration must be a JSON object')
        return errors, warnings

    resolver = resolver_for(path)

    if not config.get('name'):
        errors.append('Missing required field: name')

    if not config.get('id') and not config.get('experienceId'):
        warnings.append('No experience ID in config (must be provided as option)')

    maps = config.get('maps') or []
    if not maps:
        errors.append('At least one map is required')

    script = config.get('script') or {}
    if script.get('file') and not os.path.exists(resolver.path(script['file'])):
        errors.append(f"Script file not found: {script['file']}")

    strings = config.get('strings') or {}
    if strings.get('file') and not os.path.exists(resolver.path(strings['file'])):
        errors.append(f"Strings file not found: {strings['file']}")

    for index,section in enumerate(maps, start=1):
        if not section.get('map') and not section.get('levelName'):
            errors.append(f"Map {index}: Missing map name")

        spatial = section.get('spatial') or section.get('spatialData') or {}
        reference = spatial.get('file')
        if reference and not os.path.exists(resolver.path(reference)):
            errors.append(f"Map {index}: Spatial file not found: {reference}")

    return errors, warnings



async def deploy(client, config, id=None, base=None, mutators=None, categories=None):
    """ Apply an experience configuration to the service. *config* is either
        a path to a configuration file or an already-parsed configuration;
        in the latter case file references resolve against *base*, or the
        current directory. The play element id is *id* if given, otherwise
        the one in the configuration.

        Returns the decoded update response and the translation warnings.
    """

    if isinstance(config, (str, os.PathLike)):
        resolver = resolver_for(config)
        config = load_config(config)
    else:
        resolver = FileResolver(base or os.getcwd())

    if id is None:
        id = config.get('id') or config.get('experienceId')
    if not id:
        raise InvalidPayloadError('Experience ID must be provided either in the configuration (id or experienceId) or as an argument')

    logger.info("Fetching current experience (%s)", id)
    current = await client.get_play_element_decoded(id, include_denied=True)

    modifier = PlayElementModifier(current)
    warnings = apply(modifier, config, resolver, mutators, categories)

    built = modifier.build()
    updated = await client.update_play_element(id, built['play_element'], built['play_element_design'],
                                               current=current)

    logger.info("Experience %s updated", id)
    return updated, warnings



async def download(client, id):
    """ Fetch play element *id* and return it as an experience configuration.
    """

    current = await client.get_play_element_decoded(id, include_denied=True)
    return export(current)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
