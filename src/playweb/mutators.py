""" Constructors for mutators, the named rule settings a design carries either
    globally or per map. A mutator is a dictionary::

        {'name': 'SpottingAllowed',
         'category': 'WA_ST_Gameplay',
         'kind': {'mutator_boolean': {'value': False}}}

    Per-team settings use one of the sparse kinds, which carry a default and
    a list of ``{'index': team, 'value': x}`` overrides. Team indices start at
    one; an index with no override, or an override with no value, takes the
    default.
"""


class Mutators:
    """ Names of commonly used mutators.
    """

    FRIENDLY_FIRE = 'FriendlyFireDamageReflectionEnabled'
    FRIENDLY_FIRE_MAX_KILLS = 'FriendlyFireDamageReflectionMaxTeamKills'

    AIM_ASSIST_SLOWDOWN = 'AimAssistSlowdownEnabled'
    AIM_ASSIST_SNAP_ZOOM = 'AimAssistSnapZoomEnabled'
    AIM_ASSIST_SNAP_RADIUS = 'AimAssistSnapCapsuleRadiusMultiplier'

    PROJECTILE_SPEED = 'ProjectileSpeedMultiplier'
    RELOAD_WHOLE_MAGAZINE = 'ReloadWholeWeaponMagazines'

    SPOTTING_ALLOWED = 'SpottingAllowed'
    STATIONARY_EMPLACEMENTS_ALLOWED = 'StationaryEmplacementsAllowed'
    DISABLE_VEHICLE_3P = 'DisableVehicle3p'
    PORTAL_RESTRICTED_FEEDBACK = 'bPortalRestrictedGameFeedback'

    MAX_PLAYERS_PER_TEAM = 'MaxPlayerCount_PerTeam'
    MAX_TEAM_COUNT = 'MaxTeamCount'
    AI_MAX_COUNT_PER_TEAM = 'AiMaxCount_PerTeam'
    FRIENDLY_FIRE_ALLOWED_PER_TEAM = 'FriendlyFireAllowed_PerTeam'
    SQUAD_REVIVE_ALLOWED_PER_TEAM = 'SquadReviveAllowed_PerTeam'
    SQUAD_SIZE_PER_TEAM = 'SquadSize_PerTeam'
    SQUAD_SPAWN_MODE_PER_TEAM = 'SquadSpawnMode_PerTeam'
    FACTION_ID_PER_TEAM = 'FactionID_PerTeam'
    DAMAGE_MULTIPLIER_PER_TEAM = 'DamageMultiplier_PerTeam'

    AI_SPAWN_TYPE = 'AiSpawnType'

    SOLDIER_MAX_HEALTH_PER_TEAM = 'SoldierMaxHealthMultiplier_PerTeam'
    SOLDIER_MOVEMENT_SPEED_PER_TEAM = 'SoldierMovementSpeedMultiplier_PerTeam'
    SOLDIER_REGEN_RATE_PER_TEAM = 'SoldierRegenRateMultiplier_PerTeam'
    SOLDIER_REGEN_ALLOWED_PER_TEAM = 'SoldierHealthRegenAllowed_PerTeam'
    SOLDIER_RESPAWN_DELAY_PER_TEAM = 'SoldierRespawnDelayMultiplier_PerTeam'
    MAN_DOWN_EXPERIENCE_TYPE_PER_TEAM = 'ManDownExperienceType_PerTeam'
    FALL_DAMAGE_HEIGHT_PER_TEAM = 'FallDamageHeightMultiplier_PerTeam'
    PRONE_ALLOWED_PER_TEAM = 'ProneAllowed_PerTeam'
    SLIDE_ALLOWED_PER_TEAM = 'SlideAllowed_PerTeam'
    SPRINT_ALLOWED_PER_TEAM = 'SprintAllowed_PerTeam'
    SPRINT_STRAFE_ALLOWED_PER_TEAM = 'SprintStrafeAllowed_PerTeam'
    ON_FOOT_SPAWN_ALLOWED_PER_TEAM = 'OnFootSpawnAllowed_PerTeam'
    INFINITE_WEAPON_AMMO_PER_TEAM = 'InfiniteWeaponAmmo_PerTeam'
    INFINITE_WEAPON_MAGAZINES_PER_TEAM = 'InfiniteWeaponMagazines_PerTeam'

    BODYSHOT_MULTIPLIER_PER_TEAM = 'BodyshotMultiplier_PerTeam'
    HEADSHOT_MULTIPLIER_PER_TEAM = 'HeadshotMultiplier_PerTeam'

    VEHICLE_ALLOW_PASSENGERS = 'Vehicle_AllowPassengers'
    VEHICLE_HEALTH_REGEN_ALLOWED_PER_TEAM = 'VehicleHealthRegenAllowed_PerTeam'
    VEHICLE_MAX_HEALTH_PER_TEAM = 'VehicleMaxHealthMultiplier_PerTeam'
    VEHICLE_REGEN_RATE_PER_TEAM = 'VehicleRegenRateMultiplier_PerTeam'
    VEHICLE_DAMAGE_MULTIPLIER_PER_TEAM = 'VehicleDamageMultiplier_PerTeam'
    VEHICLE_SPAWN_DELAY_PER_TEAM = 'VehicleSpawnDelayMultiplier_PerTeam'
    EXIT_VEHICLES_ALLOWED_PER_TEAM = 'ExitVehiclesAllowed_PerTeam'

    AI_VEHICLE_ALLOW_PASSENGERS = 'AI_Vehicle_AllowAiInPassengerSeats'
    AI_MAN_DOWN_TYPE_PER_TEAM = 'AI_ManDownExperienceType_PerTeam'
    AI_DAMAGE_MULTIPLIER_PER_TEAM = 'AI_DamageMultiplier_PerTeam'
    AI_SOLDIER_MAX_HEALTH_PER_TEAM = 'AI_SoldierMaxHealthMultiplier_PerTeam'
    AI_SOLDIER_MOVEMENT_SPEED_PER_TEAM = 'AI_SoldierMovementSpeedMultiplier_PerTeam'
    AI_SOLDIER_REGEN_RATE_PER_TEAM = 'AI_SoldierRegenRateMultiplier_PerTeam'
    AI_SOLDIER_REGEN_ALLOWED_PER_TEAM = 'AI_SoldierHealthRegenAllowed_PerTeam'
    AI_SOLDIER_RESPAWN_DELAY_PER_TEAM = 'AI_SoldierRespawnDelayMultiplier_PerTeam'
    AI_VEHICLE_DAMAGE_MULTIPLIER_PER_TEAM = 'AI_VehicleDamageMultiplier_PerTeam'
    AI_ON_FOOT_SPAWN_ALLOWED_PER_TEAM = 'AI_OnFootSpawnAllowed_PerTeam'
    AI_EXIT_VEHICLES_ALLOWED_PER_TEAM = 'AI_ExitVehiclesAllowed_PerTeam'
    AI_SPRINT_ALLOWED_PER_TEAM = 'AI_SprintAllowed_PerTeam'
    AI_SQUAD_SPAWN_MODE_PER_TEAM = 'AI_SquadSpawnMode_PerTeam'

    SCOREBOARD_TYPE = 'ScoreboardType'
    COMPASS_ALLOWED_PER_TEAM = 'CompassAllowed_PerTeam'
    CROSSHAIRS_ALLOWED_PER_TEAM = 'CrosshairsAllowed_PerTeam'
    HUD_ALLOWED_PER_TEAM = 'HUDAllowed_PerTeam'
    MINIMAP_ALLOWED_PER_TEAM = 'MinimapAllowed_PerTeam'
    FRIENDLY_IDENTIFICATION_ALLOWED_PER_TEAM = 'FriendlyIdentificationAllowed_PerTeam'
    PING_BEHAVIOR_PER_TEAM = 'PingBehavior_PerTeam'
    HUD_INVENTORY_AUTO_HIDE_PER_TEAM = 'HUDInventoryAutoHide_PerTeam'
    HEALTH_BAR_ALLOWED_PER_TEAM = 'HealthBarAllowed_PerTeam'
    HIDE_DAMAGE_NUMBERS_PER_TEAM = 'HideDamageNumbers_PerTeam'
    HIT_INDICATOR_ALLOWED_PER_TEAM = 'HitIndicatorAllowed_PerTeam'
    KILL_FEED_ALLOWED_PER_TEAM = 'KillFeedAllowed_PerTeam'
    SQUAD_LIST_ALLOWED_PER_TEAM = 'SquadListAllowed_PerTeam'

    UI_IMAGE_TYPE = 'UIImageType'
    ALPHA_DISABLED = 'AlphaDisabled'
    COLOR_DISABLED = 'ColorDisabled'
    CAPTURE_POINT_SCALE_ALLOWED = 'CapturePointScaleAllowed'
    USE_REDUCED_FRIENDLY_WORLD_ICON = 'UseReducedFriendlyWorldIcon'
    RESTRICT_COMMUNICATION_UI = 'bRestrictCommunicationUI'
    RESTRICT_COMMUNICATION_VO = 'bRestrictCommunicationVO'

    SPAWN_BALANCE_START_TIMER = 'SpawnBalancing_GamemodeStartTimer'
    SPAWN_BALANCE_RATIO = 'SpawnBalancing_GamemodePlayerCountRatio'
    HQ_SPAWN = 'HQ_PlayerSpawn'
    INFANTRY_SPAWN = 'InfantrySpawn'

    GAME_TIME = 'fPortalExperienceGameTime'
    MODIFIER_GAME_MODE = 'ModBuilder_GameMode'
    GENERATE_NAV_MESH = 'Portal_GenerateNavMesh'
    ENABLE_CLASS_LOCKED_WEAPON_LOADOUTS = 'EnableClassLockedWeaponLoadouts'

    PORTAL_EXPERIENCE = 'Portal_Experience'

# end of class Mutators



class MutatorCategories:

    GAMEPLAY = 'WA_ST_Gameplay'
    TEAMS = 'WA_ST_Teams'
    SOLDIER = 'WA_ST_Soldier'
    AI = 'WA_ST_AI'
    UI = 'WA_ST_UI'
    VEHICLE = 'WA_ST_Vehicle'
    SETTINGS = 'WA_ST_Settings'
    EXTRA_SETTINGS = 'WA_ST_ExtraSettings'
    GAME_MODE_CUSTOM = 'WA_GM_Custom'
    GAME_MODE_RUSH = 'WA_GM_Rush'
    GAME_MODE_CONQUEST = 'WA_GM_Conquest'
    GAME_MODE_BREAKTHROUGH = 'WA_GM_Breakthrough'

# end of class MutatorCategories



def mutator(name, value, category=None):
    """ Return a scalar mutator. The kind follows the Python type of *value*:
        booleans, integers, floats and strings are all accepted.
    """

    if isinstance(value, bool):
        kind = {'mutator_boolean': {'value': value}}
    elif isinstance(value, int):
        kind = {'mutator_int': {'value': value}}
    elif isinstance(value, float):
        kind = {'mutator_float': {'value': value}}
    elif isinstance(value, str):
        kind = {'mutator_string': {'value': value}}
    else:
        raise TypeError(f"unsupported mutator value for {name}: {value!r}")

    return _mutator(name, kind, category)



def sparse_mutator(name, team_values, default=None, category=None):
    """ Return a per-team mutator from *team_values*, one value per team in
        team order. The kind follows the first value. If *default* is not
        specified the first team's value is used.

        Boolean entries equal to the default are emitted as an index with no
        value, which is how the service itself writes them.
    """

    team_values = list(team_values)

    if team_values:
        first = team_values[0]
        if isinstance(first, bool):
            kind = 'boolean'
        elif isinstance(first, int):
            kind = 'int'
        else:
            kind = 'float'
    else:
        kind = 'int'

    if default is None and team_values:
        default = team_values[0]

    sparse = list()
    for index,value in enumerate(team_values, start=1):
        if kind == 'boolean' or isinstance(value, bool):
            if value != default:
                sparse.append({'index': index, 'value': value})
            else:
                sparse.append({'index': index})
        else:
            sparse.append({'index': index, 'value': value})

    if kind == 'boolean':
        field = 'mutator_sparse_boolean'
        if default is None:
            default = True
    elif kind == 'float':
        field = 'mutator_sparse_float'
        if default is None:
            default = 1.0
        default = float(default)
    else:
        field = 'mutator_sparse_int'
        if default is None:
            default = 0

    kind = {field: {
        'default_value': default,
        'size': len(team_values),
        'sparse_values': sparse,
    }}

    return _mutator(name, kind, category)



def _mutator(name, kind, category):
    result = {'name': name}
    if category is not None:
        result['category'] = category
    result['kind'] = kind
    return result



def team_value(mutator, team):
    """ Return the effective value of a sparse *mutator* for the 1-based
        *team* index. Indices with no override take the default.
    """

    for sparse in mutator['kind'].values():
        break
    else:
        raise ValueError(f"mutator {mutator.get('name')} has no kind")

    try:
        default = sparse['default_value']
    except KeyError:
        raise ValueError(f"mutator {mutator.get('name')} is not a sparse mutator")

    for entry in sparse.get('sparse_values', ()):
        if entry.get('index') == team and 'value' in entry:
            return entry['value']

    return default


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
