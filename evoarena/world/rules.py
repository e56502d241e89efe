"""The rules of the arena.

The player floats around and avoids the enemies until it cannot; enemies
wiggle randomly until the end of time. Touching an enemy kills the player,
turns it black and freezes the world until it is restarted.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from evoarena.world.models import (
    BLACK,
    Controls,
    Enemy,
    Player,
    Position,
    Rect,
    World,
    WorldConfig,
)

__all__ = [
    "apply_controls",
    "detect_collisions",
    "enemy_spawn_position",
    "gameplay",
    "handle_bounds",
    "setup_world",
    "update",
    "world_boundary",
]


def setup_world(config: WorldConfig, rng: np.random.Generator) -> World:
    """Create a world with the player at the origin and enemies scattered around it."""
    player = Player(radius=config.player_radius)
    enemies = [
        Enemy(
            position=enemy_spawn_position(player, config, rng),
            radius=config.enemy_radius,
        )
        for _ in range(config.num_enemies)
    ]
    logger.debug(
        "[World] Setup | enemies={}, size={}x{}",
        len(enemies),
        config.width,
        config.height,
    )
    return World(player=player, enemies=enemies, config=config)


def enemy_spawn_position(
    player: Player, config: WorldConfig, rng: np.random.Generator
) -> Position:
    """Random position keeping clear of the player.

    Each axis independently lands on either side of the player, at least
    ``spawn_clearance`` player radii away from it.
    """
    clearance = player.radius * config.spawn_clearance
    half = min(config.width, config.height) / 2 * config.spawn_fraction

    def _axis(center: float) -> float:
        if rng.uniform(0.0, 1.0) > 0.5:
            return float(rng.uniform(-half, center - clearance))
        return float(rng.uniform(center + clearance, half))

    return Position(x=_axis(player.position.x), y=_axis(player.position.y))


def update(
    world: World, controls: Controls | None, rng: np.random.Generator
) -> World:
    """Advance the world by one tick and return it.

    A restart request on a finished world returns a brand-new world.
    """
    controls = controls or Controls()
    world = apply_controls(world, controls, rng)
    if world.player.alive:
        gameplay(world, controls, rng)
        detect_collisions(world)
        handle_bounds(world)
        world.tick += 1
    return world


def apply_controls(
    world: World, controls: Controls, rng: np.random.Generator
) -> World:
    if controls.restart and not world.player.alive:
        logger.info("[World] Restart after {} ticks", world.tick)
        return setup_world(world.config, rng)
    return world


def gameplay(world: World, controls: Controls, rng: np.random.Generator) -> None:
    """Move the player to the target and make every enemy take a random step."""
    if controls.target is not None:
        world.player.position = Position(x=controls.target.x, y=controls.target.y)

    if not world.enemies:
        return
    jitter = world.config.enemy_jitter
    steps = rng.uniform(-jitter, jitter, size=(len(world.enemies), 2))
    for enemy, (dx, dy) in zip(world.enemies, steps):
        enemy.position.x += float(dx)
        enemy.position.y += float(dy)


def detect_collisions(world: World) -> bool:
    """Kill the player if any enemy overlaps it. Returns True on a fresh kill.

    Overlap is tested per axis against the sum of radii, so the contact
    region is a square rather than a circle.
    """
    player = world.player
    if not player.alive:
        return False

    for enemy in world.enemies:
        reach = player.radius + enemy.radius
        dx = abs(player.position.x - enemy.position.x)
        dy = abs(player.position.y - enemy.position.y)
        if dx < reach and dy < reach:
            player.color = BLACK
            player.alive = False
            logger.debug(
                "[World] Collision at tick {} | player=({:.1f}, {:.1f})",
                world.tick,
                player.position.x,
                player.position.y,
            )
            return True
    return False


def handle_bounds(world: World) -> None:
    rect = world.config.rect
    world_boundary(world.player.position, rect)
    for enemy in world.enemies:
        world_boundary(enemy.position, rect)


def world_boundary(position: Position, rect: Rect) -> None:
    """Clamp a position to the window so nothing leaves the arena."""
    if position.y > rect.top:
        position.y = rect.top
    if position.y < rect.bottom:
        position.y = rect.bottom
    if position.x < rect.left:
        position.x = rect.left
    if position.x > rect.right:
        position.x = rect.right
