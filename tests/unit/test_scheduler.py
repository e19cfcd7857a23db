"""Unit tests for BroadcastScheduler."""

import json
import threading
import time

import numpy as np
import pytest

from orbsim.core import BroadcastScheduler, SchedulerConfig, Particle


class RecordingSubscriber:
    """Subscriber that keeps every payload it receives."""

    def __init__(self, name="sub"):
        self.name = name
        self.payloads = []
        self._lock = threading.Lock()

    def send(self, payload):
        with self._lock:
            self.payloads.append(payload)

    @property
    def count(self):
        with self._lock:
            return len(self.payloads)

    def __repr__(self):
        return f"RecordingSubscriber({self.name})"


class FailingSubscriber:
    def send(self, payload):
        raise ConnectionError("socket closed")


@pytest.fixture
def idle_scheduler(service):
    """Scheduler whose driver never fires on its own, for calling tick() directly."""
    scheduler = BroadcastScheduler(service, SchedulerConfig(period=3600.0))
    yield scheduler
    scheduler.shutdown()


@pytest.fixture
def fast_scheduler(service):
    scheduler = BroadcastScheduler(service, SchedulerConfig(period=0.005))
    yield scheduler
    scheduler.shutdown()


class TestSchedulerConfig:
    def test_default_period(self):
        assert SchedulerConfig().period == 0.016


class TestSubscriberLifecycle:
    """Driver activity follows subscriber presence."""

    def test_inactive_without_subscribers(self, idle_scheduler):
        assert not idle_scheduler.is_active
        assert idle_scheduler.subscriber_count == 0

    def test_first_subscribe_starts(self, idle_scheduler):
        assert idle_scheduler.subscribe(RecordingSubscriber())
        assert idle_scheduler.is_active

    def test_second_subscribe_keeps_running(self, idle_scheduler):
        a, b = RecordingSubscriber("a"), RecordingSubscriber("b")
        idle_scheduler.subscribe(a)
        idle_scheduler.subscribe(b)
        idle_scheduler.unsubscribe(a)
        assert idle_scheduler.is_active
        assert idle_scheduler.subscribers == (b,)

    def test_last_unsubscribe_stops(self, idle_scheduler):
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)
        assert idle_scheduler.unsubscribe(sub)
        assert not idle_scheduler.is_active

    def test_duplicate_subscribe_ignored(self, idle_scheduler):
        sub = RecordingSubscriber()
        assert idle_scheduler.subscribe(sub)
        assert not idle_scheduler.subscribe(sub)
        assert idle_scheduler.subscriber_count == 1

    def test_unknown_unsubscribe_ignored(self, idle_scheduler):
        assert not idle_scheduler.unsubscribe(RecordingSubscriber())
        assert not idle_scheduler.is_active

    def test_restart_after_stop(self, idle_scheduler):
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)
        idle_scheduler.unsubscribe(sub)
        idle_scheduler.subscribe(sub)
        assert idle_scheduler.is_active

    def test_shares_service_lock(self, idle_scheduler, service):
        assert idle_scheduler.lock is service.lock

    def test_shutdown(self, fast_scheduler):
        fast_scheduler.subscribe(RecordingSubscriber())
        thread = fast_scheduler._thread
        fast_scheduler.shutdown()
        assert not fast_scheduler.is_active
        assert fast_scheduler.subscriber_count == 0
        assert not thread.is_alive()


class TestTick:
    """One step-encode-send firing."""

    def test_no_subscribers_no_step(self, idle_scheduler, service):
        service.add_particle(Particle(0.0, 0.0, vx=1.0))
        assert idle_scheduler.tick() == 0
        assert idle_scheduler.ticks == 0
        assert service.get_particle(0).position == (0.0, 0.0)

    def test_tick_steps_and_sends(self, idle_scheduler, service):
        service.add_particle(Particle(0.0, 0.0, vx=1.0, vy=2.0, mass=3.0))
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)

        assert idle_scheduler.tick() == 1
        data = json.loads(sub.payloads[0])
        assert data == [{"x": pytest.approx(0.01), "y": pytest.approx(0.02), "vx": 1.0, "vy": 2.0, "mass": 3.0}]

    def test_same_payload_to_every_subscriber(self, idle_scheduler, service):
        service.add_particle(Particle(3.0, 4.0))
        subs = [RecordingSubscriber(str(i)) for i in range(3)]
        for sub in subs:
            idle_scheduler.subscribe(sub)

        assert idle_scheduler.tick() == 3
        assert idle_scheduler.ticks == 1
        assert len({sub.payloads[0] for sub in subs}) == 1

    def test_delivers_while_paused(self, idle_scheduler, service):
        service.add_particle(Particle(0.0, 0.0, vx=1.0))
        service.toggle()
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)

        idle_scheduler.tick()
        assert json.loads(sub.payloads[0])[0]["x"] == 0.0

    def test_empty_store_sends_empty_array(self, idle_scheduler):
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)
        idle_scheduler.tick()
        assert sub.payloads == ["[]"]

    def test_failing_subscriber_isolated(self, idle_scheduler, caplog):
        bad, good = FailingSubscriber(), RecordingSubscriber()
        idle_scheduler.subscribe(bad)
        idle_scheduler.subscribe(good)

        with caplog.at_level("WARNING", logger="orbsim.core.scheduler"):
            assert idle_scheduler.tick() == 1

        assert good.count == 1
        assert idle_scheduler.subscriber_count == 2
        assert idle_scheduler.is_active
        assert "socket closed" in caplog.text

    def test_serialization_failure_skips_tick(self, service, caplog):
        calls = []

        def flaky_encoder(snapshot):
            calls.append(len(snapshot))
            if len(calls) == 1:
                raise ValueError("cannot encode")
            return "ok"

        scheduler = BroadcastScheduler(service, SchedulerConfig(period=3600.0), encoder=flaky_encoder)
        sub = RecordingSubscriber()
        scheduler.subscribe(sub)
        try:
            with caplog.at_level("ERROR", logger="orbsim.core.scheduler"):
                assert scheduler.tick() == 0
            assert sub.payloads == []
            assert "serialization failed" in caplog.text

            assert scheduler.tick() == 1
            assert sub.payloads == ["ok"]
        finally:
            scheduler.shutdown()

    def test_non_finite_state_skips_broadcast(self, idle_scheduler, service, caplog):
        service.add_particle(Particle(1.79e308, 0.0, vx=1e308))
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)
        with np.errstate(over="ignore", invalid="ignore"):
            with caplog.at_level("ERROR", logger="orbsim.core.scheduler"):
                assert idle_scheduler.tick() == 0
        assert sub.payloads == []
        assert idle_scheduler.ticks == 1
        assert "serialization failed" in caplog.text

    def test_stopped_driver_does_nothing(self, idle_scheduler):
        sub = RecordingSubscriber()
        idle_scheduler.subscribe(sub)
        stale = threading.Event()
        stale.set()
        assert idle_scheduler.tick(stale) == 0
        assert sub.count == 0


class TestPeriodicDriver:
    """The background thread fires while subscribers exist."""

    def test_broadcasts_periodically(self, fast_scheduler, service, wait_until):
        service.add_particle(Particle(0.0, 0.0, vx=1.0))
        sub = RecordingSubscriber()
        fast_scheduler.subscribe(sub)

        assert wait_until(lambda: sub.count >= 5)
        xs = [json.loads(p)[0]["x"] for p in sub.payloads[:5]]
        assert xs == sorted(xs)
        assert xs[0] < xs[-1]

    def test_no_broadcast_after_last_unsubscribe(self, fast_scheduler, wait_until):
        sub = RecordingSubscriber()
        fast_scheduler.subscribe(sub)
        assert wait_until(lambda: sub.count >= 2)

        fast_scheduler.unsubscribe(sub)
        received = sub.count
        time.sleep(0.05)
        assert sub.count == received
        assert not fast_scheduler.is_active

    def test_driver_thread_exits_after_stop(self, fast_scheduler, wait_until):
        sub = RecordingSubscriber()
        fast_scheduler.subscribe(sub)
        thread = fast_scheduler._thread
        assert thread.is_alive()
        fast_scheduler.unsubscribe(sub)
        assert wait_until(lambda: not thread.is_alive())

    def test_external_mutations_during_broadcast(self, fast_scheduler, service, wait_until):
        service.start(30)
        sub = RecordingSubscriber()
        fast_scheduler.subscribe(sub)

        for i in range(100):
            service.add_particle(Particle(float(i % 10), 0.0))
            service.remove_particle(len(service) - 1)
            service.remove_particle(0)
            service.add_particle(Particle(-float(i % 10), 5.0))

        after_mutations = sub.count
        assert wait_until(lambda: sub.count > after_mutations)
        assert len(json.loads(sub.payloads[-1])) == 30
