from django.test import SimpleTestCase

from examination.exams.security import SecurityFeatureFlags, is_critical_violation
from examination.monitor import SecurityMonitor
from examination.monitor.security_monitor import FULLSCREEN_EXIT_EVENT
from examination.tests.monitor.fakes import FakeEventSource


class SecurityFeatureFlagsTests(SimpleTestCase):
    def test_from_dict_accepts_camel_case_and_ignores_unknown_keys(self):
        flags = SecurityFeatureFlags.from_dict({"copyPastePrevention": False, "fullscreen_required": True, "foo": 1})
        self.assertFalse(flags.copy_paste_prevention)
        self.assertTrue(flags.fullscreen_required)
        self.assertTrue(flags.tab_switch_detection)

    def test_master_switch_disables_every_feature(self):
        flags = SecurityFeatureFlags(enabled=False)
        self.assertFalse(flags.is_enabled("tab_switch_detection"))
        self.assertFalse(flags.is_enabled("tabSwitchDetection"))

    def test_client_dict_uses_camel_case(self):
        data = SecurityFeatureFlags().to_client_dict()
        self.assertEqual(data["devToolsDetection"], True)
        self.assertEqual(data["fullscreenRequired"], False)
        self.assertEqual(data["enabled"], True)

    def test_critical_kinds(self):
        self.assertTrue(is_critical_violation("tab_switch"))
        self.assertTrue(is_critical_violation("fullscreen_exit"))
        self.assertFalse(is_critical_violation("copy_paste"))


class SecurityMonitorTests(SimpleTestCase):
    def setUp(self):
        self.source = FakeEventSource()

    def test_attach_registers_listener_per_enabled_feature(self):
        flags = SecurityFeatureFlags(copy_paste_prevention=False, print_prevention=False)
        monitor = SecurityMonitor(flags, self.source)

        monitor.attach()

        self.assertEqual(
            sorted(self.source.listeners),
            ["contextmenu", "devtools_shortcut", "visibility_hidden", "window_blur"],
        )

    def test_attach_is_idempotent_and_detach_removes_everything(self):
        monitor = SecurityMonitor(SecurityFeatureFlags(fullscreen_required=True), self.source)
        monitor.attach()
        attached = len(monitor.attached_events)
        monitor.attach()

        self.assertEqual(sum(len(c) for c in self.source.listeners.values()), attached)
        monitor.detach()
        self.assertEqual(self.source.listeners, {})
        self.assertEqual(monitor.attached_events, [])

    def test_disabled_flags_attach_nothing(self):
        monitor = SecurityMonitor(SecurityFeatureFlags.disabled(), self.source)
        monitor.attach()
        self.assertEqual(self.source.listeners, {})
        self.assertTrue(monitor.exam_can_start)

    def test_events_are_queued_as_violations(self):
        monitor = SecurityMonitor(SecurityFeatureFlags(), self.source)
        monitor.attach()

        self.source.fire("paste", "Strg+V")
        self.source.fire("window_blur")

        events = monitor.drain()
        self.assertEqual([e.kind for e in events], ["copy_paste", "tab_switch"])
        self.assertEqual(events[0].details, "Strg+V")
        self.assertFalse(events[0].critical)
        self.assertTrue(events[1].critical)
        self.assertEqual(monitor.drain(), [])

    def test_no_events_after_detach(self):
        monitor = SecurityMonitor(SecurityFeatureFlags(), self.source)
        monitor.attach()
        monitor.detach()
        self.source.fire("copy")
        self.assertEqual(monitor.drain(), [])

    def test_fullscreen_needs_user_gesture_before_start(self):
        monitor = SecurityMonitor(SecurityFeatureFlags(fullscreen_required=True), self.source)
        self.assertFalse(monitor.exam_can_start)

        self.assertFalse(monitor.enter_fullscreen(user_gesture=False))
        self.assertFalse(monitor.exam_can_start)

        self.assertTrue(monitor.enter_fullscreen(user_gesture=True))
        self.assertTrue(monitor.exam_can_start)

    def test_leaving_fullscreen_is_reported_once(self):
        monitor = SecurityMonitor(SecurityFeatureFlags(fullscreen_required=True), self.source)
        monitor.attach()
        monitor.enter_fullscreen(user_gesture=True)

        self.source.fire(FULLSCREEN_EXIT_EVENT)
        self.source.fire(FULLSCREEN_EXIT_EVENT)

        self.assertEqual([e.kind for e in monitor.drain()], ["fullscreen_exit"])
        self.assertFalse(monitor.exam_can_start)

    def test_unsupported_fullscreen_is_not_required(self):
        monitor = SecurityMonitor(
            SecurityFeatureFlags(fullscreen_required=True), self.source, fullscreen_supported=False
        )
        monitor.attach()
        self.assertTrue(monitor.exam_can_start)
        self.assertNotIn(FULLSCREEN_EXIT_EVENT, self.source.listeners)
