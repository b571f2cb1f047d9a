import numpy as np
import pytest

from squishies.components import CollisionGroup, WeaponType
from squishies.config import RED
from squishies.events import Explosion
from squishies.game import Game
from squishies.squishy import create_circle


@pytest.fixture
def game():
    return Game()


def test_setup_populates_level(game):
    game.setup()
    names = {e.name for e in game.world}
    assert {"Squishy 1", "Squishy 2", "Squishy 3", "Beam", "Platform", "Gear"} <= names
    by_name = {e.name: e for e in game.world}
    assert by_name["Squishy 1"].user_controlled
    assert not by_name["Squishy 2"].user_controlled
    assert by_name["Beam"].body.fixed
    assert by_name["Platform"].body.fixed
    assert by_name["Gear"].body.fixed
    assert by_name["Beam"].collider.collision_group == CollisionGroup.STATIC
    assert not by_name["Beam"].collider.accepts(by_name["Platform"].collider)
    assert by_name["Gear"].collider.collision_group == CollisionGroup.KINEMATIC


def test_spawn_character_has_inventory_and_collider(game):
    entity = game.spawn_character("Alpha", (1.0, 2.0, 0.0), RED)
    assert entity.name == "Alpha"
    assert entity.colour == RED
    assert entity.collider.collision_group == CollisionGroup.CHARACTER
    assert entity.character is not None
    assert len(entity.body.points) == 20
    assert np.allclose(entity.body.derived_position, [1.0, 2.0, 0.0])
    types = [item.type for item in entity.inventory.items]
    assert types == [WeaponType.NADE, WeaponType.MINE, WeaponType.BALLOON]
    assert all(item.count == 5 for item in entity.inventory.items)


def test_reset_inventory_restores_stock(game):
    entity = game.spawn_character("Alpha", (0.0, 0.0, 0.0), RED)
    entity.inventory.items[0].count = 0
    entity.inventory.items.pop()
    entity.inventory.selected_index = 1
    game.reset_inventory(entity)
    assert len(entity.inventory.items) == 3
    assert entity.inventory.selected_index == 0
    assert entity.inventory.items[0].count == 5


def test_move_jump_duck_apply_forces(game):
    entity = game.spawn_character("Alpha", (0.0, 0.0, 0.0), RED)
    game.move(entity, -1.0)
    assert all(pm.force[0] == -10.0 for pm in entity.body.points)
    game.jump(entity)
    assert all(pm.force[1] == 500.0 for pm in entity.body.points)
    game.duck(entity)
    assert all(pm.force[1] == 0.0 for pm in entity.body.points)


def test_deploy_weapon_spawns_grenade(game):
    player = game.spawn_character("Alpha", (0.0, 0.0, 0.0), RED)
    before = len(game.world)
    event = game.deploy_weapon(player, (10.0, 0.0, 0.0))
    assert len(game.world) == before + 1
    grenades = [e for e in game.world if e.grenade is not None]
    assert len(grenades) == 1
    nade = grenades[0]
    assert nade.grenade.player is player
    assert nade.collider.collision_group == CollisionGroup.PROJECTILE
    assert not nade.collider.accepts(player.collider)
    assert event.power == 20.0
    for pm in nade.body.points:
        assert np.linalg.norm(pm.velocity) == pytest.approx(event.power)
        assert pm.velocity[0] > 0.0


def test_deploy_weapon_without_inventory_raises(game):
    entity = game.world.spawn(create_circle(1.0, 8), (0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        game.deploy_weapon(entity, (1.0, 0.0, 0.0))


def test_grenade_fuse_counts_down_then_explodes(game, capsys):
    player = game.spawn_character("Alpha", (0.0, 0.0, 0.0), RED)
    game.deploy_weapon(player, (10.0, 0.0, 0.0))
    nade = next(e for e in game.world if e.grenade is not None)

    game.update(1.0)
    assert nade in game.world
    assert nade.grenade.timer == pytest.approx(2.0)
    assert game.splits == []

    game.update(2.0)
    assert nade not in game.world
    assert len(game.splits) == 1
    assert game.splits[0].player is player
    assert "GOTCHA!" in capsys.readouterr().out


def test_explode_hits_points_within_radius(game):
    player = game.spawn_character("Alpha", (0.0, 0.0, 0.0), RED)
    explosion = Explosion((0.5, 0.0, 0.0), 1.0, 2.0)
    results = game.explode(explosion)
    assert len(results) == 1
    split = results[0]
    assert split.power == explosion.power
    assert np.allclose(split.epicenter, explosion.position)
    assert split.hitpoints
    for index, dist_sq in split.hitpoints:
        offset = player.body.points[index].position - explosion.position
        assert dist_sq == pytest.approx(float(np.dot(offset, offset)))
        assert dist_sq <= explosion.radius ** 2


def test_explode_far_away_hits_nothing(game):
    game.spawn_character("Alpha", (0.0, 0.0, 0.0), RED)
    assert game.explode(Explosion((30.0, 30.0, 0.0), 1.0)) == []
    assert game.splits == []


def test_explode_ignores_non_characters(game):
    game.world.spawn(create_circle(1.0, 12), (0.0, 0.0, 0.0))
    assert game.explode(Explosion((0.0, 0.0, 0.0), 3.0)) == []


def test_camera_tracks_user_controlled_character(game):
    player = game.spawn_character("Alpha", (10.0, 10.0, 0.0), RED)
    player.user_controlled = True
    start = game.camera_target.copy()
    destination = player.body.derived_position + np.array([0.0, 2.0, 0.0])
    z_before = game.camera_position[2]
    game.update(0.1)
    assert np.linalg.norm(game.camera_target - destination) < np.linalg.norm(start - destination)
    assert game.camera_position[0] == pytest.approx(game.camera_target[0])
    assert game.camera_position[1] == pytest.approx(game.camera_target[1] + 0.5)
    assert game.camera_position[2] == z_before