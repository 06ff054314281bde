# tests/integration/test_scenarios.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from turnstate import DuplicateError, ManualTimeSource, Module, Runtime, Scheduler, SnapshotError, State


class HappinessModule:
    """Module used across scenarios: keeps a happiness score and reports changes."""

    name = "mymod"

    def __init__(self, delay=0, priority=1, expire_after=None):
        self.changes = []
        self._options = {"delay": delay, "priority": priority, "expire_after": expire_after}

    def init(self, game):
        game.set("happiness", 25)
        game.add_trigger("happiness", self.on_change)
        game.schedule(self.make_happy, **self._options)

    def on_change(self, value, old_value):
        self.changes.append((value, old_value))

    def make_happy(self, game, data=None):
        game.set("happiness", 100)


@pytest.fixture
def world(clock):
    return Runtime(Scheduler(clock=clock), State())


class TestScenarios:
    def test_scheduled_bump_fires_trigger(self, world, clock):
        """init sets a value, subscribes and schedules; the next tick updates it."""
        module = HappinessModule(delay=0, priority=1)
        world.register_module(module)
        assert world.state.get("happiness") == 25

        clock.advance(1)
        assert world.tick() is True
        assert world.state.get("happiness") == 100
        assert module.changes == [(100, 25)]
        assert world.tick() is False

    def test_delayed_item_waits_for_its_time(self, world, clock):
        module = HappinessModule(delay=10000, expire_after=10000)
        world.register_module(module)

        for _ in range(6):
            assert world.tick() is False
            clock.advance(1500)
        # 9000ms elapsed, still not due
        assert world.state.get("happiness") == 25

        clock.advance(1500)
        assert world.tick() is True
        assert world.state.get("happiness") == 100

    def test_expired_item_dropped(self, world, clock):
        module = HappinessModule(delay=100, expire_after=50)
        world.register_module(module)

        clock.advance(200)
        assert world.tick() is False
        assert world.state.get("happiness") == 25
        assert module.changes == []
        assert world.to_dict()["schedule"] == []

    def test_duplicate_registration(self, world):
        world.register_module(HappinessModule())
        with pytest.raises(DuplicateError):
            world.register_module(HappinessModule())

    def test_cross_module_scheduling_by_name(self, world):
        log = []

        world.register_module(
            {"name": "caller", "init": lambda iface: iface.schedule("callee.answer", data="ping")}
        )
        # Registered after the item was scheduled; resolved at fire time.
        world.register_module({"name": "callee", "answer": lambda iface, data: log.append(data)})

        assert world.tick() is True
        assert log == ["ping"]

    def test_trigger_chain_across_modules(self, world):
        def sensor_init(iface):
            iface.add_trigger("temperature", lambda new, old: iface.set("alarm", new > 30))

        def alarm_init(iface):
            iface.add_trigger("alarm", lambda new, old: iface.schedule("ring") if new else None)

        def heat(iface, data):
            iface.set("temperature", data)

        alarm = Module(name="alarm", init=alarm_init, functions={"ring": lambda iface, data: iface.set("rung", True)})
        world.register_module(Module(name="sensor", init=sensor_init, functions={"heat": heat}))
        world.register_module(alarm)
        world.register_module({"name": "weather", "init": lambda iface: iface.schedule("sensor.heat", data=35)})

        assert world.run_pending() == 2
        assert world.state.get("alarm") is True
        assert world.state.get("rung") is True


class TestSnapshots:
    def test_round_trip(self, world, clock):
        def init(iface):
            iface.set("h", {"nested": [1, 2]})
            iface.schedule("later", delay=100, priority=4, expire_after=50, data={"n": 1})
            iface.schedule("soon", delay=10)

        world.register_module({"name": "mod", "init": init})
        text = world.to_snapshot()

        restored = Runtime.from_snapshot(text, clock=clock)
        assert restored.to_dict() == world.to_dict()
        assert restored.state.get("h") == {"nested": [1, 2]}
        assert len(restored.modules) == 0

    def test_snapshot_shape(self, world, clock):
        world.register_module({"name": "mod", "init": lambda iface: iface.schedule("f", delay=5)})
        data = json.loads(world.to_snapshot())
        assert data == {
            "schedule": [{"id": "mod.f", "priority": 0, "when": clock.now() + 5}],
            "state": {},
        }

    def test_restored_runtime_needs_modules_again(self, world, clock):
        module = HappinessModule()
        world.register_module(module)
        text = world.to_snapshot()

        restored = Runtime.from_snapshot(text, clock=clock)
        # Nothing registered: the pending item is skipped.
        assert restored.tick() is False

        again = Runtime.from_snapshot(text, clock=clock)
        again.register_module({"name": "mymod", "make_happy": module.make_happy})
        assert again.tick() is True
        assert again.state.get("happiness") == 100
        # Triggers were not restored.
        assert module.changes == []

    def test_consumed_items_not_exported(self, world):
        world.register_module({"name": "mod", "init": lambda iface: iface.schedule("f"), "f": lambda i, d: None})
        world.tick()
        assert Runtime.from_snapshot(world.to_snapshot()).to_dict()["schedule"] == []

    def test_from_snapshot_rejects_garbage(self):
        with pytest.raises(SnapshotError):
            Runtime.from_snapshot("{broken")
        with pytest.raises(SnapshotError):
            Runtime.from_snapshot('{"schedule": [{"when": 1}], "state": {}}')
        with pytest.raises(SnapshotError):
            Runtime.from_snapshot('{"schedule": [{"id": "m.a", "when": null}, {"id": "m.b", "when": 5}], "state": {}}')
        with pytest.raises(SnapshotError):
            Runtime.from_snapshot('{"schedule": {}, "state": []}')

    @pytest.mark.property
    @given(
        state=st.dictionaries(
            st.text(max_size=8),
            st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=8), st.lists(st.integers(), max_size=4)),
            max_size=10,
        ),
        items=st.lists(
            st.tuples(
                st.integers(min_value=0, max_value=10000),  # delay
                st.integers(min_value=-10, max_value=10),  # priority
                st.one_of(st.none(), st.integers(min_value=0, max_value=1000)),  # expire_after
                st.one_of(st.none(), st.integers(), st.text(max_size=5)),  # data
            ),
            max_size=15,
        ),
    )
    def test_round_trip_property(self, state, items):
        clock = ManualTimeSource(start=0)
        runtime = Runtime(Scheduler(clock=clock))

        def init(iface):
            for key, value in state.items():
                iface.set(key, value)
            for index, (delay, priority, expire_after, data) in enumerate(items):
                iface.schedule(f"f{index}", delay=delay, priority=priority, expire_after=expire_after, data=data)

        runtime.register_module({"name": "mod", "init": init})
        restored = Runtime.from_snapshot(runtime.to_snapshot(), clock=clock)

        assert restored.state.export_snapshot() == state
        assert restored.to_dict() == runtime.to_dict()
