import pytest

from flocking.core.scheduler import Scheduler, Stage


def _recorder(log, name):
    def system(world):
        log.append(name)

    system.__name__ = name
    return system


def test_before_and_after_order_systems(world):
    log = []
    scheduler = Scheduler()
    scheduler.add_system(Stage.UPDATE, _recorder(log, "c"), after="b")
    scheduler.add_system(Stage.UPDATE, _recorder(log, "a"), before="b")
    scheduler.add_system(Stage.UPDATE, _recorder(log, "b"))

    scheduler.run_stage(Stage.UPDATE, world)

    assert log == ["a", "b", "c"]


def test_stages_run_in_tick_order(world):
    log = []
    scheduler = Scheduler()
    scheduler.add_system(Stage.POST_UPDATE, _recorder(log, "post"))
    scheduler.add_system(Stage.PHYSICS, _recorder(log, "physics"))
    scheduler.add_system(Stage.UPDATE, _recorder(log, "update"))
    scheduler.add_system(Stage.INPUT, _recorder(log, "input"))

    scheduler.run_tick(world)

    assert log == ["input", "update", "physics", "post"]


def test_startup_runs_once(world):
    log = []
    scheduler = Scheduler()
    scheduler.add_system(Stage.STARTUP, _recorder(log, "startup"))
    scheduler.add_system(Stage.UPDATE, _recorder(log, "update"))

    scheduler.run_tick(world)
    scheduler.run_tick(world)

    assert log == ["startup", "update", "update"]


def test_cycle_is_rejected(world):
    scheduler = Scheduler()
    scheduler.add_system(Stage.UPDATE, _recorder([], "a"), after="b")
    scheduler.add_system(Stage.UPDATE, _recorder([], "b"), after="a")

    with pytest.raises(RuntimeError):
        scheduler.compile()


def test_cannot_add_after_compile():
    scheduler = Scheduler()
    scheduler.compile()

    with pytest.raises(RuntimeError):
        scheduler.add_system(Stage.UPDATE, _recorder([], "late"))


def test_clear_allows_new_registration(world):
    log = []
    scheduler = Scheduler()
    scheduler.add_system(Stage.UPDATE, _recorder(log, "old"))
    scheduler.compile()

    scheduler.clear()
    scheduler.add_system(Stage.UPDATE, _recorder(log, "new"))
    scheduler.run_stage(Stage.UPDATE, world)

    assert log == ["new"]
    assert len(scheduler.systems(Stage.UPDATE)) == 1
