# squishies

A small 2D soft-body physics simulation. Bodies are rings of point masses held
together by spring joints and shape matching. They fall under gravity, bounce
off the world bounds, collide with each other and can be caught in grenade
blasts.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building shapes

`squishies.poly` makes plain outlines: `create_rect`, `create_square`,
`create_circle`, `create_ellipse` and `create_gear`. Each returns a `Poly`,
which can be changed in place with `translate`, `rotate` (counter-clockwise,
in degrees) and `scale`. `Poly.center` gives the average of its points.

`squishies.squishy` turns those outlines into a `Squishy`: an outline plus its
`Joint`s and a colour. For `create_circle` and `create_ellipse`, `strength`
sets how many following points around the outline each point is joined to.

```python
from squishies import squishy

ball = squishy.create_circle(1.0, 20, 3, (1.0, 0.0, 0.0, 1.0))
plank = squishy.create_rect(10.0, 2.0, (1.0, 1.0, 1.0, 1.0))
plank.poly.rotate(-30.0)
```

## Simulating

`squishies.world.World` holds entities and steps their physics:

```python
from squishies import squishy
from squishies.components import Collider, CollisionGroup
from squishies.world import World

world = World()
ball = world.spawn(squishy.create_circle(1.0, 20, 3), (0.0, 5.0, 0.0),
                   collider=Collider(CollisionGroup.CHARACTER), name="ball")
for _ in range(100):
    world.fixed_update(0.01)
world.update(0.01)
print(ball.position)
```

- `World.spawn` builds a `SoftBody` from a squishy at a position and returns
  its `Entity`.
- `World.fixed_update` runs one step: gravity, joint springs and shape
  matching, integration, bouncing off the world bounds, collisions between
  entities whose colliders accept each other, and velocity damping.
- `World.update` copies each body's points into the entity's render vertices
  and sets `needs_update` when they changed.
- `World.reset_bodies` puts every body back in its rest shape at its original
  position.
- `World.remove` takes an entity out (raising `KeyError` if it is not there).

Gravity, the world bounds and the spatial grid size come from
`squishies.config.get_config()`; a different `Config` may be passed to
`World`. `squishies.world.spring_force` is the damped spring used throughout,
and `squishies.collision.CollisionSolver` does the point-in-polygon detection
and response.

## Playing

`squishies.game.Game` wraps a `World` and an `EventDispatcher` (`Game.events`).
`Game.setup` builds the standard scene: three characters, a fixed floor, a
tilted platform and a gear. From there:

- `Game.move`, `Game.jump` and `Game.duck` push a character's points;
- `Game.deploy_weapon` throws a grenade from the character towards a target
  (the character needs an inventory, as `spawn_character` gives it);
- `Game.update` makes the camera target follow the user-controlled
  character, refreshes the world and counts down grenade fuses.

When a fuse runs out the grenade is removed and an `Explosion` is dispatched.
`Game.explode` finds the characters whose points lie inside the blast radius
and dispatches a `SplitSquishy` event for each; the game prints a line and
keeps these events in `Game.splits`.

## Cameras, lights and the sun

`squishies.camera.Camera` gives view and projection matrices (the projection
takes an aspect ratio) and moves: `move_forward`, `move_up`, `move_right`,
`move_to_target`, and `yaw`, `pitch` and `roll` with angles in radians.
`create_perspective` and `create_orthographic` make cameras; `Light` carries a
camera for its shadow view.

`squishies.sun.Sun` is a rough day/night model. Set sunrise, sunset and time of
day in seconds, or in hours and minutes, plus cloud cover and storminess with
`set_weather`, then call `update_light_properties` for a direction, colour and
ambient level.

## What it does not do

The package only computes state. It opens no window, draws nothing, reads no
keyboard or mouse input and has no command to run; the caller drives `Game`
or `World` and renders the results. Characters hit by a blast are reported
but not split apart.