"""
Examination Settings Access

Central accessor for the ``EXAM_SESSION`` settings dict. Every key has a
default here, so projects only override what they need and tests can use
``override_settings(EXAM_SESSION={...})``.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from typing import Any

from django.conf import settings

DEFAULTS = {
    # Toleranz für Netzwerklatenz nach Ablauf der Bearbeitungszeit
    "TIMER_GRACE_PERIOD_SECONDS": 30,
    "DEFAULT_DURATION_MINUTES": 60,
    # Anteil der Bearbeitungszeit, ab dem die Sitzung als "fast abgelaufen" gilt
    "NEAR_EXPIRATION_RATIO": 0.1,
    "DEFAULT_SECURITY_FEATURES": {
        "enabled": True,
        "dev_tools_detection": True,
        "copy_paste_prevention": True,
        "context_menu_disabled": True,
        "print_prevention": True,
        "tab_switch_detection": True,
        "fullscreen_required": False,
    },
    "ALLOW_UNASSIGNED_START": False,
}


def get_setting(name: str) -> Any:
    """Returns the configured value for ``name`` or its default."""
    configured = getattr(settings, "EXAM_SESSION", None) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]
