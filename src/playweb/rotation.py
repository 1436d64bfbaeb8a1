""" Map rotation entries and their defaults.

    A map entry is a dictionary keyed by schema field name::

        {'level_name': 'MP_Battery',
         'level_location': 'ModBuilderCustom0',
         'rounds': 1,
         'allowed_spectators': 4,
         'team_composition': {...},
         'mutators': [],
         'blaze_game_settings': None,
         'game_server_joinability_settings': None}

    Two additional keys, ``spatial_data`` and ``spatial_filename``, are
    accepted on input; they never reach the service as part of the rotation
    but become a spatial attachment for the map instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .document import BalancingMethod, RotationBehavior


LEVEL_LOCATION = 'ModBuilderCustom0'
ROUNDS = 1
ALLOWED_SPECTATORS = 4
TEAM_CAPACITY = 16

SPATIAL_KEYS = ('spatial_data', 'spatial_filename')


def create_teams(capacities: Sequence[int], balancing: int = BalancingMethod.NONE) -> Dict[str, Any]:
    """ Return a team composition with one team per entry in *capacities*.
        Team identifiers are assigned in order starting at one; there are no
        bot teams.
    """

    teams = list()
    for team_id,capacity in enumerate(capacities, start=1):
        teams.append({'team_id': team_id, 'capacity': capacity})

    return {
        'teams': teams,
        'internal_teams': [],
        'balancing_method': int(balancing),
    }


def default_teams() -> Dict[str, Any]:
    return create_teams((TEAM_CAPACITY, TEAM_CAPACITY))



def map_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """ Return a complete map entry from a possibly partial one. The spatial
        keys are dropped; any other key is carried over unchanged.
    """

    try:
        level_name = entry['level_name']
    except KeyError:
        raise ValueError('a map entry requires a level_name')

    filled = {
        'mutators': list(entry.get('mutators') or ()),
        'level_name': level_name,
        'level_location': _given(entry, 'level_location', LEVEL_LOCATION),
        'rounds': _given(entry, 'rounds', ROUNDS),
        'allowed_spectators': _given(entry, 'allowed_spectators', ALLOWED_SPECTATORS),
        'team_composition': _given(entry, 'team_composition', None) or default_teams(),
        'blaze_game_settings': entry.get('blaze_game_settings'),
        'game_server_joinability_settings': entry.get('game_server_joinability_settings'),
    }

    for key,value in entry.items():
        if key in filled or key in SPATIAL_KEYS:
            continue
        filled[key] = value

    return filled


def _given(entry, key, default):
    value = entry.get(key)
    if value is None:
        return default
    return value



class MapRotationBuilder:
    """ Accumulate map entries for :meth:`PlayElementModifier.set_map_rotation`::

            builder = MapRotationBuilder()
            builder.add_map('MP_Battery', rounds=2, spatial_data=battery)
            builder.add_map('MP_Dumbo')
            modifier.set_map_rotation(*builder.build())
    """

    def __init__(self):
        self.maps: List[Dict[str, Any]] = list()
        self.rotation_behavior = RotationBehavior.LOOP


    def add_map(self, level_name: str, **options) -> 'MapRotationBuilder':
        entry = dict(options)
        entry['level_name'] = level_name

        spatial = dict()
        for key in SPATIAL_KEYS:
            if key in entry:
                spatial[key] = entry[key]

        entry = map_entry(entry)
        entry.update(spatial)

        self.maps.append(entry)
        return self


    def set_rotation_behavior(self, behavior: int) -> 'MapRotationBuilder':
        self.rotation_behavior = RotationBehavior(behavior)
        return self


    def build(self):
        """ Return a ``(maps, rotation_behavior)`` pair.
        """

        return list(self.maps), self.rotation_behavior


    def __len__(self):
        return len(self.maps)

# end of class MapRotationBuilder


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
