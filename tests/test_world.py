import numpy as np
import pytest
from pydantic import ValidationError

from evoarena.world import (
    BLACK,
    WHITE,
    Controls,
    Enemy,
    Player,
    Position,
    World,
    WorldConfig,
    detect_collisions,
    enemy_spawn_position,
    handle_bounds,
    setup_world,
    update,
    world_boundary,
)


def _world(enemies: list[tuple[float, float]], **config) -> World:
    return World(
        player=Player(),
        enemies=[Enemy(position=Position(x=x, y=y)) for x, y in enemies],
        config=WorldConfig(**config),
    )


class TestSetup:
    def test_default_world_matches_arena(self, rng):
        world = setup_world(WorldConfig(), rng)
        assert len(world.enemies) == 500
        assert world.player.position == Position(x=0.0, y=0.0)
        assert world.player.alive
        assert world.player.color == WHITE
        assert world.tick == 0

    def test_spawn_keeps_clear_of_player_on_both_axes(self, rng):
        config = WorldConfig()
        player = Player(radius=config.player_radius)
        clearance = config.player_radius * config.spawn_clearance
        half = config.width / 2 * config.spawn_fraction

        for _ in range(200):
            pos = enemy_spawn_position(player, config, rng)
            for value in (pos.x, pos.y):
                assert clearance <= abs(value) <= half

    def test_spawn_uses_both_sides(self, rng):
        config = WorldConfig()
        player = Player()
        xs = [enemy_spawn_position(player, config, rng).x for _ in range(100)]
        assert any(x < 0 for x in xs) and any(x > 0 for x in xs)

    def test_spawn_area_must_leave_room(self):
        with pytest.raises(ValidationError):
            WorldConfig(width=20.0, height=20.0)


class TestCollisions:
    def test_axis_aligned_overlap_kills(self):
        # euclidean distance ~12.7 > 10, but both axes are within reach
        world = _world([(9.0, 9.0)])
        assert detect_collisions(world) is True
        assert world.player.alive is False
        assert world.player.color == BLACK

    def test_touching_edge_is_not_a_collision(self):
        world = _world([(10.0, 0.0)])
        assert detect_collisions(world) is False
        assert world.player.alive

    def test_dead_player_is_not_killed_twice(self):
        world = _world([(0.0, 0.0)])
        assert detect_collisions(world) is True
        assert detect_collisions(world) is False


class TestBounds:
    def test_world_boundary_clamps_each_side(self):
        rect = WorldConfig().rect
        pos = Position(x=1000.0, y=-1000.0)
        world_boundary(pos, rect)
        assert (pos.x, pos.y) == (256.0, -256.0)

        pos = Position(x=-300.0, y=300.0)
        world_boundary(pos, rect)
        assert (pos.x, pos.y) == (-256.0, 256.0)

    def test_handle_bounds_applies_to_all_entities(self):
        world = _world([(400.0, 0.0), (0.0, -400.0)])
        world.player.position = Position(x=-999.0, y=999.0)
        handle_bounds(world)
        assert (world.player.position.x, world.player.position.y) == (-256.0, 256.0)
        assert world.enemies[0].position.x == 256.0
        assert world.enemies[1].position.y == -256.0


class TestUpdate:
    def test_player_follows_target(self, rng):
        world = _world([(200.0, 200.0)])
        world = update(world, Controls(target=Position(x=30.0, y=-20.0)), rng)
        assert (world.player.position.x, world.player.position.y) == (30.0, -20.0)
        assert world.tick == 1

    def test_target_outside_window_is_clamped(self, rng):
        world = _world([])
        world = update(world, Controls(target=Position(x=900.0, y=0.0)), rng)
        assert world.player.position.x == 256.0

    def test_enemies_wiggle_within_jitter(self, rng):
        world = _world([(100.0, 100.0)] * 20, enemy_jitter=1.0)
        world = update(world, None, rng)
        for enemy in world.enemies:
            assert abs(enemy.position.x - 100.0) <= 1.0
            assert abs(enemy.position.y - 100.0) <= 1.0
        assert len({(e.position.x, e.position.y) for e in world.enemies}) > 1

    def test_entities_stay_inside_window(self, rng):
        world = setup_world(WorldConfig(num_enemies=50, enemy_jitter=30.0), rng)
        rect = world.config.rect
        for _ in range(30):
            world = update(world, None, rng)
        for pos in [world.player.position, *(e.position for e in world.enemies)]:
            assert rect.left <= pos.x <= rect.right
            assert rect.bottom <= pos.y <= rect.top

    def test_dead_world_is_frozen(self, rng):
        world = _world([(0.0, 0.0)])
        world = update(world, None, rng)
        assert not world.player.alive
        snapshot = world.model_dump()

        world = update(world, Controls(target=Position(x=50.0, y=50.0)), rng)
        assert world.model_dump() == snapshot

    def test_restart_only_when_dead(self, rng):
        world = _world([(200.0, 200.0)], num_enemies=7)
        same = update(world, Controls(restart=True), rng)
        assert same is world

        world.player.alive = False
        fresh = update(world, Controls(restart=True), rng)
        assert fresh is not world
        assert fresh.player.alive
        assert len(fresh.enemies) == 7

    def test_same_seed_same_world(self):
        a = setup_world(WorldConfig(num_enemies=20), np.random.default_rng(5))
        b = setup_world(WorldConfig(num_enemies=20), np.random.default_rng(5))
        assert a.model_dump() == b.model_dump()
