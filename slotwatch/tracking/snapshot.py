"""
Snapshot - Typed view of one game state integration (GSI) payload.

The Snapshot is what the trackers consume each tick.
It contains:
- Match identity and clock
- Observer (local hero) position
- Enemy heroes currently on the minimap
- Cumulative kill counters per victim slot

A field that is absent from the payload is None, which is different
from "present but empty": no minimap means visibility is unknown this
tick, an empty minimap means nobody is visible.

Parsing never raises; malformed values are skipped.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import logging
import math
import re

from ..engine_core.state import Position, VICTIM_IDS, HERO_PREFIX

logger = logging.getLogger(__name__)


ENEMY_ICON = "minimap_enemyicon"
STATE_IN_PROGRESS = "DOTA_GAMERULES_STATE_GAME_IN_PROGRESS"
SELECTION_STATES = frozenset({
    "DOTA_GAMERULES_STATE_INIT",
    "DOTA_GAMERULES_STATE_WAIT_FOR_PLAYERS_TO_LOAD",
    "DOTA_GAMERULES_STATE_HERO_SELECTION",
})
VICTIM_KEY = re.compile(r"^victimid_(\d+)$")


def display_name(hero_key: str) -> str:
    """
    Human-readable hero name.

    Examples:
        display_name("npc_dota_hero_storm_spirit") -> "Storm Spirit"
        display_name("npc_dota_hero_axe") -> "Axe"
    """
    key = hero_key[len(HERO_PREFIX):] if hero_key.startswith(HERO_PREFIX) else hero_key
    return " ".join(word.capitalize() for word in key.split("_") if word)


def sanitize_hero_name(hero_key: str | None) -> str:
    """Hero key without prefix, limited to [A-Za-z0-9-] (safe for file names)."""
    if not hero_key:
        return ""
    key = hero_key[len(HERO_PREFIX):] if hero_key.startswith(HERO_PREFIX) else hero_key
    return re.sub(r"[^a-zA-Z0-9-]", "", key)


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    # NaN and infinities would poison game-clock arithmetic
    return number if math.isfinite(number) else None


def _position(data: dict[str, Any]) -> Position | None:
    x = _as_float(data.get("xpos"))
    y = _as_float(data.get("ypos"))
    if x is None or y is None:
        return None
    return Position(x, y)


@dataclass(frozen=True)
class VisibleEnemy:
    """An enemy hero icon on the minimap."""
    name: str
    position: Position | None = None


@dataclass(frozen=True)
class Snapshot:
    """
    One tick of game state.

    Build with `Snapshot.from_payload(body)` from the raw webhook JSON.
    """
    game_time: float = 0.0
    game_state: str | None = None
    match_id: str | None = None
    observer: Position | None = None
    enemies: tuple[VisibleEnemy, ...] | None = None
    kill_counters: dict[int, int] | None = None

    @property
    def in_progress(self) -> bool:
        return self.game_state == STATE_IN_PROGRESS

    @property
    def in_selection(self) -> bool:
        return self.game_state in SELECTION_STATES

    @property
    def visible_names(self) -> frozenset[str] | None:
        if self.enemies is None:
            return None
        return frozenset(enemy.name for enemy in self.enemies)

    @property
    def enemy_positions(self) -> dict[str, Position]:
        if self.enemies is None:
            return {}
        return {e.name: e.position for e in self.enemies if e.position is not None}

    @classmethod
    def from_payload(cls, payload: Any) -> Snapshot:
        """Parse a raw GSI body, skipping anything malformed."""
        if not isinstance(payload, dict):
            logger.debug("Ignoring non-object payload of type %s", type(payload).__name__)
            return cls()

        game_map = payload.get("map")
        game_map = game_map if isinstance(game_map, dict) else {}
        match_id = game_map.get("matchid")
        game_state = game_map.get("game_state")

        hero = payload.get("hero")
        observer = _position(hero) if isinstance(hero, dict) else None

        return cls(
            game_time=_as_float(game_map.get("game_time")) or 0.0,
            game_state=game_state if isinstance(game_state, str) else None,
            match_id=str(match_id) if match_id is not None else None,
            observer=observer,
            enemies=cls._parse_minimap(payload.get("minimap")),
            kill_counters=cls._parse_kill_list(payload.get("player")),
        )

    @staticmethod
    def _parse_minimap(minimap: Any) -> tuple[VisibleEnemy, ...] | None:
        if not isinstance(minimap, dict):
            return None

        enemies: dict[str, VisibleEnemy] = {}
        for entity in minimap.values():
            if not isinstance(entity, dict):
                continue
            name = entity.get("name")
            if entity.get("image") != ENEMY_ICON or not isinstance(name, str):
                continue
            if not name.startswith(HERO_PREFIX):
                continue
            enemies[name] = VisibleEnemy(name=name, position=_position(entity))

        return tuple(enemies.values())

    @staticmethod
    def _parse_kill_list(player: Any) -> dict[int, int] | None:
        if not isinstance(player, dict):
            return None
        kill_list = player.get("kill_list")
        if not isinstance(kill_list, dict):
            return None

        counters = {}
        for key, value in kill_list.items():
            match = VICTIM_KEY.match(str(key))
            if not match or int(match.group(1)) not in VICTIM_IDS:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                continue
            counters[int(match.group(1))] = value

        return counters
