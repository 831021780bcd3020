from unittest import mock

from django.test import SimpleTestCase

from examination.exceptions import ProctoringTransportError, SessionClosed
from examination.monitor import AutoSubmitCoordinator, SessionTimer
from examination.tests.monitor.fakes import FakeClock


class SessionTimerTests(SimpleTestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.on_expire = mock.Mock()
        self.timer = SessionTimer(60, self.on_expire, clock=self.clock)

    def test_counts_down_with_clock(self):
        self.clock.advance(20)
        self.assertEqual(self.timer.tick(), 40)
        self.on_expire.assert_not_called()

    def test_expires_exactly_once(self):
        self.clock.advance(61)
        self.assertEqual(self.timer.tick(), 0)
        self.timer.tick()

        self.on_expire.assert_called_once_with()
        self.assertTrue(self.timer.expired)
        self.assertEqual(self.timer.remaining, 0)

    def test_reseed_replaces_remaining_time(self):
        self.clock.advance(50)
        self.timer.reseed(30)
        self.assertEqual(self.timer.remaining, 30)

    def test_negative_seed_is_already_expired(self):
        timer = SessionTimer(-5, self.on_expire, clock=self.clock)
        timer.tick()
        self.on_expire.assert_called_once_with()

    def test_suspended_timer_is_frozen(self):
        self.clock.advance(10)
        self.timer.suspend()
        self.clock.advance(100)

        self.assertEqual(self.timer.remaining, 50)
        self.timer.tick()
        self.on_expire.assert_not_called()

    def test_resumed_timer_continues_from_frozen_time(self):
        self.clock.advance(10)
        self.timer.suspend()
        self.clock.advance(100)
        self.timer.resume()

        self.assertEqual(self.timer.remaining, 50)
        self.clock.advance(50)
        self.timer.tick()
        self.on_expire.assert_called_once_with()

    def test_cancelled_timer_does_not_fire(self):
        self.timer.cancel()
        self.clock.advance(100)
        self.timer.tick()
        self.on_expire.assert_not_called()


class AutoSubmitCoordinatorTests(SimpleTestCase):
    def test_only_first_trigger_submits(self):
        submit_fn = mock.Mock(return_value={"submitted": True})
        started = mock.Mock()
        coordinator = AutoSubmitCoordinator(submit_fn, on_submit_started=started)

        self.assertEqual(coordinator.request_submit("manual"), {"submitted": True})
        self.assertIsNone(coordinator.request_submit("timeout"))

        submit_fn.assert_called_once_with("manual")
        started.assert_called_once_with()
        self.assertTrue(coordinator.submitted)
        self.assertEqual(coordinator.trigger, "manual")

    def test_trigger_during_submission_is_suppressed(self):
        inner = []

        def submit_fn(trigger):
            inner.append(coordinator.request_submit("timeout"))
            return {"submitted": True}

        coordinator = AutoSubmitCoordinator(submit_fn)
        coordinator.request_submit("violation")

        self.assertEqual(inner, [None])
        self.assertEqual(coordinator.trigger, "violation")

    def test_transport_error_allows_retry(self):
        submit_fn = mock.Mock(side_effect=[ProctoringTransportError(), {"submitted": True}])
        coordinator = AutoSubmitCoordinator(submit_fn)

        with self.assertRaises(ProctoringTransportError):
            coordinator.request_submit("manual")
        self.assertFalse(coordinator.in_flight)
        self.assertFalse(coordinator.submitted)

        self.assertEqual(coordinator.request_submit("manual"), {"submitted": True})

    def test_transport_error_calls_failure_callback(self):
        failed = mock.Mock()
        coordinator = AutoSubmitCoordinator(
            mock.Mock(side_effect=ProctoringTransportError()), on_submit_failed=failed
        )

        with self.assertRaises(ProctoringTransportError):
            coordinator.request_submit("manual")

        failed.assert_called_once_with()

    def test_server_rejection_closes_coordinator(self):
        coordinator = AutoSubmitCoordinator(mock.Mock(side_effect=SessionClosed()))

        with self.assertRaises(SessionClosed):
            coordinator.request_submit("timeout")
        self.assertTrue(coordinator.submitted)
        self.assertIsNone(coordinator.request_submit("manual"))
