"""
Example commands covering every declaration style, plus a small scene to run
them against. Excluded from the cache when ``include_examples`` is off.
"""

from __future__ import annotations

import logging
import math
import sys
from enum import Enum
from typing import Any, Callable, List, Optional

from .directory import SceneDirectory
from .markers import command, command_callback, command_field
from .typesys import Vector3

logger = logging.getLogger("consolekit.demo")

MAX_HEALTH = 100.0


class DifficultyLevel(Enum):
    EASY = 0
    NORMAL = 1
    HARD = 2
    NIGHTMARE = 3


def _announce_pause(paused: bool) -> None:
    logger.info("Game %s", "paused" if paused else "resumed")


class ExampleCommands:
    health: float = command_field(100.0)
    _ammunition: int = command_field(30, name="ammo", include_private=True)
    gametime: float = command_field(0.0, static=True)
    difficulty: int = command_field(1, static=True)

    on_health_changed: Optional[Callable[[float], None]] = command_callback(("health", float), name="onhealthchanged")
    on_game_paused: Optional[Callable[[bool], None]] = command_callback(
        ("paused", bool), name="ongamepaused", static=True, default=_announce_pause
    )

    def __init__(self) -> None:
        self._score = 0
        self.position = Vector3(0.0, 0.0, 0.0)
        self.invincible = False
        self.on_health_changed = self._apply_health

    def _apply_health(self, value: float) -> None:
        self.health = value
        logger.info("Health changed to %s", value)

    @command
    @property
    def score(self) -> int:
        return self._score

    @score.setter
    def score(self, value: int) -> None:
        self._score = value

    @command("healthpercent")
    @property
    def health_percentage(self) -> float:
        return round(self.health / MAX_HEALTH * 100.0, 2)

    @command
    @property
    def isalive(self) -> bool:
        return self.health > 0

    @isalive.setter
    def isalive(self, value: bool) -> None:
        if not value:
            self.health = 0.0
        elif self.health <= 0:
            self.health = 1.0

    @command
    def resethealth(self) -> None:
        self.health = MAX_HEALTH
        logger.info("Health reset to 100")

    @command
    def addhealth(self, amount: float) -> float:
        self.health = max(0.0, min(MAX_HEALTH, self.health + amount))
        return self.health

    @command
    def teleport(self, position: Vector3) -> None:
        self.position = position
        logger.info("Teleported to %s", position)

    @command("god")
    def set_invincible(self, enabled: bool) -> None:
        self.invincible = enabled
        logger.info("God mode %s", "enabled" if enabled else "disabled")

    @command
    def getdistancefromorigin(self) -> float:
        return math.sqrt(sum(component * component for component in self.position))

    @command
    def setdifficulty(self, level: DifficultyLevel) -> None:
        self.difficulty = level.value
        logger.info("Difficulty set to %s", level.name)

    @command
    @staticmethod
    def restart() -> None:
        logger.info("Game restart requested")


@command
def echo(text: str) -> str:
    return text


def build_demo_scene(interactive: bool = False) -> SceneDirectory:
    scene = SceneDirectory(interactive=interactive)
    scene.spawn("Player1", ExampleCommands(), tags=["Player"])
    scene.spawn("Player2", ExampleCommands(), tags=["Player"])
    scene.spawn("Enemy", ExampleCommands(), tags=["Enemy"])
    scene.spawn("Crate", tags=["Prop"])
    return scene


def demo_universe() -> List[Any]:
    return [sys.modules[__name__]]
