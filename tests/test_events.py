"""
Tests for the onboarding event bus and metrics.
"""
import unittest

from sparks_onboarding.onboarding.events import (
    OnboardingEventBus, OnboardingMetrics, EventType,
    SessionStartedEvent, SessionCompletedEvent, GenerationFailedEvent
)


class TestOnboardingEventBus(unittest.TestCase):

    def setUp(self):
        self.bus = OnboardingEventBus()
        self.received = []

    def test_typed_and_global_handlers(self):
        typed, everything = [], []
        self.bus.subscribe(EventType.SESSION_STARTED, typed.append)
        self.bus.subscribe_all(everything.append)

        self.bus.emit(SessionStartedEvent("s1", 1.0, 300))
        self.bus.emit(GenerationFailedEvent("s1", 2.0, "LLMError", "boom"))

        self.assertEqual(len(typed), 1)
        self.assertEqual(typed[0].data, {"time_limit_seconds": 300})
        self.assertEqual([e.event_type for e in everything],
                         [EventType.SESSION_STARTED, EventType.GENERATION_FAILED])

    def test_failing_handler_does_not_stop_others(self):
        def broken(event):
            raise RuntimeError("handler bug")

        self.bus.subscribe(EventType.SESSION_STARTED, broken)
        self.bus.subscribe(EventType.SESSION_STARTED, self.received.append)
        self.bus.emit(SessionStartedEvent("s1", 1.0, 300))
        self.assertEqual(len(self.received), 1)

    def test_unsubscribe(self):
        self.bus.subscribe(EventType.SESSION_STARTED, self.received.append)
        self.bus.unsubscribe(EventType.SESSION_STARTED, self.received.append)
        self.bus.unsubscribe(EventType.SESSION_STARTED, self.received.append)
        self.bus.emit(SessionStartedEvent("s1", 1.0, 300))
        self.assertEqual(self.received, [])

    def test_clear_handlers(self):
        self.bus.subscribe_all(self.received.append)
        self.bus.clear_handlers()
        self.bus.emit(SessionStartedEvent("s1", 1.0, 300))
        self.assertEqual(self.received, [])


class TestOnboardingMetrics(unittest.TestCase):

    def test_counts_and_forced_completions(self):
        metrics = OnboardingMetrics()
        metrics.handle_event(SessionStartedEvent("s1", 1.0, 300))
        metrics.handle_event(SessionCompletedEvent("s1", 2.0, "time_expired", 3, ["age"]))
        metrics.handle_event(SessionCompletedEvent("s2", 3.0, "profile_complete", 7, []))

        counts = metrics.get_metrics()
        self.assertEqual(counts["sessions_started"], 1)
        self.assertEqual(counts["sessions_completed"], 2)
        self.assertEqual(counts["forced_completions"], 1)

    def test_reset(self):
        metrics = OnboardingMetrics()
        metrics.handle_event(SessionStartedEvent("s1", 1.0, 300))
        metrics.reset()
        self.assertTrue(all(value == 0 for value in metrics.get_metrics().values()))


if __name__ == "__main__":
    unittest.main()
