""" Translation between a declarative experience configuration and the edits
    a :class:`~playweb.modifier.PlayElementModifier` applies.

    An experience configuration is the JSON document users write by hand::

        {
            "name": "Hardcore Breakthrough",
            "published": false,
            "rotation": "loop",
            "script": {"file": "Script.ts"},
            "strings": {"file": "Strings.json"},
            "maps": [
                {"map": "MP_Battery", "teams": [32, 32], "balancing": "skill",
                 "spatial": {"file": "battery.spatial.json"},
                 "bots": [{"team": 2, "count": 8, "type": "fill"}],
                 "rules": [{"name": "SprintAllowed_PerTeam", "perTeamValues": [true, false]}]}
            ],
            "globalRules": [{"name": "SpottingAllowed", "value": false}],
            "restrictions": [{"tagId": "vehicle_kht", "allowAll": false}]
        }

    The keys follow the configuration format, not the schema, and several
    older spellings are still accepted (``levelName``, ``teamSize``,
    ``teamBalancing`` and so on). :func:`apply` translates a configuration
    into modifier calls; :func:`export` goes the other way, from a fetched
    document to a configuration.

    File references in a configuration are resolved by a :class:`Resolver`;
    the base class accepts inline content only, see
    :class:`playweb.loader.FileResolver` for one that reads files.
"""

import logging
import math
import os

from . import json
from .categories import is_uuid, table
from .document import (
    AttachmentType,
    BalancingMethod,
    CapacityType,
    PublishState,
    RotationBehavior,
    Toggle,
    attachment_type,
    filename,
)
from .errors import InvalidPayloadError
from .mutators import mutator, sparse_mutator
from .rotation import ALLOWED_SPECTATORS, ROUNDS, TEAM_CAPACITY, create_teams


logger = logging.getLogger(__name__)

DEFAULT_SCRIPT = '// Default script\nconsole.log("Experience loaded");'

TEAM_SIZES = {
    '16v16': [16, 16],
    '32v32': [32, 32],
    '64v64': [64, 64],
}


class Resolver:
    """ Produce the content referenced by the script, spatial and strings
        sections of a configuration. Inline content is returned as-is; file
        references are handed to :meth:`read`, which this class does not
        implement.
    """

    def script(self, section):
        if not section:
            return None

        for key in ('inline', 'code'):
            if section.get(key):
                return section[key]

        if section.get('file'):
            return self.read(section['file'])

        raise InvalidPayloadError('script configuration must have either "file", "inline", or "code"')


    def spatial(self, section):
        if not section:
            return None

        for key in ('inline', 'data'):
            if section.get(key):
                return section[key]

        if section.get('file'):
            return self.read(section['file'])

        return None


    def strings(self, section):
        if not section:
            return None

        if section.get('data'):
            return section['data']

        reference = section.get('file')
        if not reference:
            return None

        content = self.read(reference)
        try:
            json.loads(content)
        except json.DecodeError as e:
            raise InvalidPayloadError(f"Invalid JSON in strings file {reference}: {e}") from e

        return content


    def read(self, reference):
        raise InvalidPayloadError(f"cannot resolve file reference {reference!r} without a base directory")

# end of class Resolver



def apply(modifier, config, resolver=None, mutators=None, categories=None):
    """ Apply the experience *config* to *modifier*. *mutators* optionally
        maps mutator names to known mutators, whose ids are then carried
        into the rules built here; *categories* optionally maps asset
        category names to UUIDs ahead of the built-in table.

        Returns a list of warnings. A restriction whose category cannot be
        resolved is skipped with a warning; the rest of the configuration is
        still applied.
    """

    if resolver is None:
        resolver = Resolver()

    warnings = list()

    try:
        name = config['name']
    except KeyError:
        raise InvalidPayloadError('experience configuration requires a name')

    modifier.set_name(name)

    description = config.get('description')
    if description:
        modifier.set_description(description)

    state = normalize_publish_state(config.get('published'), config.get('publishState'))
    logger.info("Publish state: %s", PublishState(state).name)
    modifier.set_publish_state(state)

    code = resolver.script(config.get('script'))
    if code is None:
        code = DEFAULT_SCRIPT
    logger.info("TypeScript code: %d lines", len(code.split('\n')))
    modifier.set_script_payload(code)

    strings = resolver.strings(config.get('strings'))
    if strings is not None:
        modifier.set_localization_strings(strings)

    maps = build_map_rotation(config.get('maps') or (), resolver, mutators)
    behavior = normalize_rotation_behavior(config.get('rotation') or config.get('rotationBehavior'))
    logger.info("Rotation behavior: %s", behavior.name)

    modifier.clear_spatial_attachments()
    modifier.set_map_rotation(maps, behavior)

    rules = config.get('globalRules')
    if rules:
        modifier.set_global_rules([build_mutator(rule, mutators) for rule in rules])
        logger.info("Applied %d global rule(s)", len(rules))

    restrictions = config.get('restrictions')
    if restrictions:
        built = list()
        for restriction in restrictions:
            category = build_asset_category(restriction, categories)
            if category is None:
                message = f"Asset category {restriction.get('tagId')!r} could not be resolved, restriction skipped"
                logger.warning(message)
                warnings.append(message)
            else:
                built.append(category)

        modifier.set_asset_categories(built)
        logger.info("Applied %d restriction(s)", len(built))

    return warnings



def build_map_rotation(maps, resolver=None, mutators=None):
    """ Return map entries for :meth:`PlayElementModifier.set_map_rotation`
        from the ``maps`` section of a configuration.
    """

    if resolver is None:
        resolver = Resolver()

    entries = list()

    for index,section in enumerate(maps):
        level_name = normalize_map_name(section)
        teams = create_teams(normalize_team_sizes(section), normalize_balancing_method(section))

        bots = section.get('bots')
        if bots:
            internal = list()
            for bot in bots:
                internal.append({
                    'team_id': normalize_bot_team_id(bot),
                    'capacity': bot['count'],
                    'capacity_type': normalize_bot_capacity_type(normalize_bot_spawn_type(bot)),
                })
            teams['internal_teams'] = internal

        entry = {
            'level_name': level_name,
            'rounds': _first(section, ('rounds',), ROUNDS),
            'allowed_spectators': _first(section, ('spectators', 'allowedSpectators'), ALLOWED_SPECTATORS),
            'team_composition': teams,
        }

        spatial = normalize_spatial_data(section)
        if spatial:
            data = resolver.spatial(spatial)
            if data:
                entry['spatial_data'] = data
                if spatial.get('file'):
                    entry['spatial_filename'] = os.path.basename(spatial['file'])
                else:
                    entry['spatial_filename'] = f"{level_name}_map{index}.spatial.json"

        rules = normalize_rules(section)
        if rules:
            entry['mutators'] = [build_mutator(rule, mutators) for rule in rules]

        joinability = normalize_joinability(section)
        if joinability:
            settings = dict()
            for key,aliases in _JOINABILITY.items():
                value = _first(joinability, aliases, None)
                if value is not None:
                    settings[key] = _toggle(value)
            entry['blaze_game_settings'] = settings

        matchmaking = normalize_matchmaking(section)
        if matchmaking is not None:
            entry['game_server_joinability_settings'] = {'matchmaking_in_progress': _toggle(matchmaking)}

        logger.debug("Map %d: %s (%d round(s))", index + 1, level_name, entry['rounds'])
        entries.append(entry)

    return entries


_JOINABILITY = {
    'join_in_progress': ('joinInProgress',),
    'open_to_join_by_player': ('openJoin', 'openToJoinByPlayer'),
    'open_to_invites': ('invites', 'openToInvites'),
}


def _toggle(value):
    return int(Toggle.ENABLED if value else Toggle.DISABLED)


def _first(section, keys, default):
    for key in keys:
        value = section.get(key)
        if value is not None:
            return value
    return default



def build_mutator(rule, mutators=None):
    """ Return a mutator for one rule of a configuration. A rule with
        ``perTeamValues`` becomes a sparse mutator; if any of its values is
        integral every value is rounded to an integer.
    """

    name = rule['name']
    category = rule.get('category')

    if 'perTeamValues' in rule:
        values = list(rule['perTeamValues'])
        default = rule.get('defaultValue')

        if any(_integral(value) for value in values):
            values = [_round(value) for value in values]
            default = _round(default)

        built = sparse_mutator(name, values, default, category)
        known = _known(mutators, name)
        if known:
            built['id'] = known

        return built

    built = mutator(name, rule['value'], category)

    known = rule.get('id') or _known(mutators, name)
    if known:
        built['id'] = known

    return built


def _integral(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _round(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    # Halves round up.
    return int(math.floor(value + 0.5))


def _known(mutators, name):
    if not mutators:
        return None

    try:
        found = mutators[name]
    except KeyError:
        return None

    if isinstance(found, dict):
        return found.get('id')
    return found



def resolve_category(tag, categories=None):
    """ Return the UUID for asset category *tag*, or None. Values that
        already look like UUIDs pass through; names are looked up in
        *categories* first, then in :func:`playweb.categories.table`.
    """

    if not tag:
        return None

    if is_uuid(tag):
        return tag

    if categories:
        found = categories.get(tag)
        if found:
            return found

    return table().uuid(tag)



def build_asset_category(restriction, categories=None):
    """ Return an asset category for one restriction of a configuration, or
        None if its category cannot be resolved.
    """

    uuid = resolve_category(restriction.get('tagId'), categories)
    if uuid is None:
        return None

    allow_all = restriction.get('allowAll')
    allowed = restriction.get('allowedTags')

    if allowed:
        boolean = {
            'default_value': allow_all is not False,
            'overrides': {
                'asset_category_tags': list(allowed),
                'value': True,
            },
        }
    elif allow_all is False:
        boolean = {'default_value': False}
    else:
        boolean = {'default_value': True}

    per_team = restriction.get('perTeamRestrictions')
    if per_team:
        overrides = list()
        for team in per_team:
            overrides.append({
                'team_id': team['teamId'],
                'asset_category_tags': list(team.get('allowedTags') or ()),
                'value': team.get('allowAll') is not False,
            })
        boolean['team_overrides'] = overrides

    return {'tag_id': uuid, 'boolean': boolean}



def normalize_rotation_behavior(behavior=None):
    if behavior is None or behavior == '':
        return RotationBehavior.LOOP

    if isinstance(behavior, int):
        return RotationBehavior(behavior)

    upper = behavior.upper()
    if upper == 'EORMM':
        return RotationBehavior.EORMM
    if upper in ('ONE_MAP', 'ONCE'):
        return RotationBehavior.ONE_MAP

    # SHUFFLE has no counterpart on the service.
    return RotationBehavior.LOOP


def normalize_publish_state(published=None, deprecated=None):
    if published is not None:
        return PublishState.PUBLISHED if published else PublishState.DRAFT
    if deprecated is not None and deprecated.upper() == 'PUBLISHED':
        return PublishState.PUBLISHED
    return PublishState.DRAFT


def normalize_bot_capacity_type(spawn_type=None):
    if spawn_type is not None and spawn_type.upper() == 'FIXED':
        return int(CapacityType.FIXED)
    return int(CapacityType.FILL)


def normalize_bot_team_id(bot):
    return bot.get('team') or bot.get('teamId') or 1


def normalize_bot_spawn_type(bot):
    return (bot.get('type') or bot.get('spawnType') or 'FILL').upper()


def normalize_map_name(section):
    return section.get('map') or section.get('levelName') or ''


def normalize_team_sizes(section):
    teams = section.get('teams')
    if teams:
        return list(teams)

    size = section.get('teamSize')
    if size in TEAM_SIZES:
        return list(TEAM_SIZES[size])

    if size == 'custom' and section.get('customTeams'):
        return [team['capacity'] for team in section['customTeams']]

    return [TEAM_CAPACITY, TEAM_CAPACITY]


def normalize_balancing_method(section):
    balancing = section.get('balancing') or section.get('teamBalancing')
    if not balancing:
        return BalancingMethod.NONE

    try:
        return BalancingMethod[balancing.upper()]
    except KeyError:
        logger.warning("Unknown balancing method %r, using NONE", balancing)
        return BalancingMethod.NONE


def normalize_spatial_data(section):
    spatial = section.get('spatial')
    if spatial:
        return {
            'file': spatial.get('file'),
            'data': spatial.get('data'),
            'inline': spatial.get('inline'),
        }
    return section.get('spatialData')


def normalize_rules(section):
    return section.get('rules') or section.get('mutators')


def normalize_joinability(section):
    return section.get('joinability') or section.get('gameSettings')


def normalize_matchmaking(section):
    if section.get('matchmaking') is not None:
        return section['matchmaking']

    settings = section.get('matchmakingSettings') or {}
    return settings.get('matchmakingInProgress')



def export(document):
    """ Return an experience configuration describing *document*, a fetched
        and normalized play element. Applying the result to the same play
        element reproduces its maps, rules, restrictions, script and strings.
    """

    element = document.get('play_element')
    if not element:
        raise InvalidPayloadError('play element not found or is not accessible')

    design = document.get('play_element_design') or {}

    config = {
        'id': element.get('id'),
        'name': element.get('name') or 'Unnamed Experience',
        'published': element.get('publish_state_type') == PublishState.PUBLISHED,
        'maps': [],
    }

    if element.get('description'):
        config['description'] = element['description']

    rotation = design.get('map_rotation') or {}
    behavior = (rotation.get('attributes') or {}).get('rotation_behavior')
    if behavior is not None:
        config['rotation'] = _ROTATION_NAMES.get(behavior, 'loop')

    for entry in rotation.get('maps') or ():
        config['maps'].append(export_map(entry))

    script = _script(design)
    if script is not None:
        config['script'] = {'code': script}

    strings = _strings(design)
    if strings is not None:
        config['strings'] = {'data': strings}

    rules = [export_rule(mutator) for mutator in design.get('mutators') or ()]
    rules = [rule for rule in rules if rule is not None]
    if rules:
        config['globalRules'] = rules

    restrictions = [export_restriction(category) for category in design.get('asset_categories') or ()]
    restrictions = [restriction for restriction in restrictions if restriction is not None]
    if restrictions:
        config['restrictions'] = restrictions

    return config


_ROTATION_NAMES = {
    RotationBehavior.LOOP: 'loop',
    RotationBehavior.EORMM: 'eormm',
    RotationBehavior.ONE_MAP: 'once',
}


def export_map(entry):
    section = {
        'map': entry.get('level_name'),
        'rounds': entry.get('rounds') or ROUNDS,
        'spectators': _first(entry, ('allowed_spectators',), ALLOWED_SPECTATORS),
    }

    composition = entry.get('team_composition') or {}
    teams = composition.get('teams')
    if teams:
        section['teams'] = [team.get('capacity') for team in teams]
        method = composition.get('balancing_method')
        if method is not None:
            try:
                section['balancing'] = BalancingMethod(method).name.lower()
            except ValueError:
                pass

    bots = list()
    for team in composition.get('internal_teams') or ():
        if team.get('capacity'):
            bots.append({
                'team': team.get('team_id'),
                'count': team['capacity'],
                'type': 'fixed' if team.get('capacity_type') == CapacityType.FIXED else 'fill',
            })
    if bots:
        section['bots'] = bots

    rules = [export_rule(mutator) for mutator in entry.get('mutators') or ()]
    rules = [rule for rule in rules if rule is not None]
    if rules:
        section['rules'] = rules

    settings = entry.get('blaze_game_settings') or {}
    joinability = dict()
    for key,aliases in _JOINABILITY.items():
        value = settings.get(key)
        if value in (Toggle.ENABLED, Toggle.DISABLED):
            joinability[aliases[0]] = value == Toggle.ENABLED
    if joinability:
        section['joinability'] = joinability

    matchmaking = (entry.get('game_server_joinability_settings') or {}).get('matchmaking_in_progress')
    if matchmaking in (Toggle.ENABLED, Toggle.DISABLED):
        section['matchmaking'] = matchmaking == Toggle.ENABLED

    return section



def export_rule(mutator):
    """ Return the configuration rule for *mutator*, or None if it has no
        recognizable kind.
    """

    name = mutator.get('name')
    kind = mutator.get('kind')
    if not name or not kind:
        return None

    rule = {'name': name}
    if mutator.get('category'):
        rule['category'] = mutator['category']

    for key in ('mutator_sparse_boolean', 'mutator_sparse_int', 'mutator_sparse_float'):
        sparse = kind.get(key)
        if sparse is None:
            continue

        default = sparse.get('default_value')
        values = dict()
        for entry in sparse.get('sparse_values') or ():
            if entry.get('index') is not None and entry.get('value') is not None:
                values[entry['index']] = entry['value']

        if not values:
            rule['value'] = default
            return rule

        last = max(values)
        rule['perTeamValues'] = [values.get(index, default) for index in range(1, last + 1)]
        rule['defaultValue'] = default
        return rule

    for key,empty in (('mutator_boolean', False), ('mutator_int', 0), ('mutator_float', 0.0), ('mutator_string', '')):
        scalar = kind.get(key)
        if scalar is None:
            continue

        value = scalar.get('value')
        rule['value'] = empty if value is None else value
        return rule

    return None



def export_restriction(category):
    tag = category.get('tag_id')
    boolean = category.get('boolean')
    if not tag or not boolean:
        return None

    default = boolean.get('default_value')
    restriction = {
        'tagId': table().name(tag),
        'allowAll': True if default is None else default,
    }

    tags = (boolean.get('overrides') or {}).get('asset_category_tags')
    if tags:
        restriction['allowedTags'] = list(tags)

    per_team = list()
    for override in boolean.get('team_overrides') or ():
        value = override.get('value')
        per_team.append({
            'teamId': override.get('team_id'),
            'allowAll': True if value is None else value,
            'allowedTags': list(override.get('asset_category_tags') or ()),
        })
    if per_team:
        restriction['perTeamRestrictions'] = per_team

    return restriction



def _script(design):
    found = None
    for attachment in design.get('attachments') or ():
        if attachment_type(attachment) != AttachmentType.SCRIPT:
            continue
        if found is None or filename(attachment) == 'Script.ts':
            found = attachment

    if found is None:
        return None
    return _text(found)


def _strings(design):
    for attachment in design.get('attachments') or ():
        if attachment_type(attachment) != AttachmentType.STRINGS:
            continue

        text = _text(attachment)
        if text is None:
            return None

        try:
            return json.loads(text)
        except json.DecodeError as e:
            logger.warning("Failed to parse strings JSON in %s: %s", filename(attachment), e)
            return None

    return None


def _text(attachment):
    content = (attachment.get('attachment_data') or {}).get('original')
    if not content:
        return None
    return bytes(content).decode('utf-8', errors='replace')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
