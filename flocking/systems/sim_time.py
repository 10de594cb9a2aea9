from dataclasses import replace

from flocking.core.world import World
from flocking.resources import SimulationTime


def advance_time(world: World, fixed_dt: float) -> SimulationTime:
    """
    Publishes SimulationTime for the coming tick. The delta systems
    integrate with is `fixed_dt * time_scale`; a scale of 0 pauses the flock.
    """
    current = world.try_resource(SimulationTime) or SimulationTime()

    delta = fixed_dt * current.time_scale
    published = replace(
        current,
        fixed_delta_seconds=fixed_dt,
        delta_seconds=delta,
        elapsed_seconds=current.elapsed_seconds + delta,
        tick=current.tick + 1,
    )
    world.add_resource(published)
    return published
