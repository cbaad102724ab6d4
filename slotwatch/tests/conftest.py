"""
Pytest fixtures for Slotwatch tests.
"""

import random

import pytest

from ..engine_core.state import MatchState, HeroIdentity, Position
from ..engine_core.correlation import CorrelationEngine
from ..tracking.snapshot import display_name, STATE_IN_PROGRESS


AXE = "npc_dota_hero_axe"
LINA = "npc_dota_hero_lina"
PUDGE = "npc_dota_hero_pudge"
STORM = "npc_dota_hero_storm_spirit"
SNIPER = "npc_dota_hero_sniper"
HEROES = [AXE, LINA, PUDGE, STORM, SNIPER]


@pytest.fixture
def state() -> MatchState:
    """Empty match state."""
    return MatchState(match_id="test_match")


@pytest.fixture
def engine(state: MatchState) -> CorrelationEngine:
    """Engine with a fixed random source."""
    return CorrelationEngine(state, rng=random.Random(7))


@pytest.fixture
def register(state: MatchState):
    """Register a hero directly in the state, as if seen on the minimap."""
    def _register(name: str, seen_at: float = 0.0, position: tuple[float, float] | None = None) -> HeroIdentity:
        hero = HeroIdentity(
            name=name,
            display_name=display_name(name),
            first_seen_at=seen_at,
            last_position=Position(*position) if position else None,
        )
        state.heroes[name] = hero
        return hero

    return _register


@pytest.fixture
def make_payload():
    """Build a raw GSI payload."""
    def _make(
        game_time: float,
        visible: dict[str, tuple[float, float]] | None = None,
        kills: dict[int, int] | None = None,
        observer: tuple[float, float] | None = None,
        match_id: str | None = "match_1",
        game_state: str = STATE_IN_PROGRESS,
    ) -> dict:
        payload = {
            "map": {
                "matchid": match_id,
                "game_time": game_time,
                "game_state": game_state,
            },
        }
        if visible is not None:
            minimap = {
                "o0": {"image": "minimap_herocircle_self", "name": "npc_dota_hero_mirana", "xpos": 0, "ypos": 0},
                "o1": {"image": "minimap_tower90", "name": "", "xpos": 10, "ypos": 10},
            }
            for index, (name, (x, y)) in enumerate(visible.items(), start=2):
                minimap[f"o{index}"] = {"image": "minimap_enemyicon", "name": name, "xpos": x, "ypos": y}
            payload["minimap"] = minimap
        if kills is not None:
            payload["player"] = {
                "kill_list": {f"victimid_{victim}": count for victim, count in kills.items()},
            }
        if observer is not None:
            payload["hero"] = {"xpos": observer[0], "ypos": observer[1]}
        return payload

    return _make
