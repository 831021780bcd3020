"""
Exam Security Configuration

Violation kinds reported by the session monitor and the immutable feature-flag
set that decides which monitor listeners are attached for an exam session.

This module has no Django imports; the proctoring client
(`examination.monitor`) uses it without a configured Django project.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Mapping, Optional

# --- Violation kinds ---

TAB_SWITCH = "tab_switch"
FULLSCREEN_EXIT = "fullscreen_exit"
DEVTOOLS_OPENED = "devtools_opened"
COPY_PASTE = "copy_paste"
RIGHT_CLICK = "right_click"
PRINT_ATTEMPT = "print_attempt"
IDLE_TIMEOUT = "idle_timeout"

VIOLATION_KINDS = (
    TAB_SWITCH,
    FULLSCREEN_EXIT,
    DEVTOOLS_OPENED,
    COPY_PASTE,
    RIGHT_CLICK,
    PRINT_ATTEMPT,
    IDLE_TIMEOUT,
)

# Violations that end the session immediately
CRITICAL_VIOLATIONS = frozenset({TAB_SWITCH, FULLSCREEN_EXIT})


def is_critical_violation(kind: str) -> bool:
    """Returns True if the violation kind forces submission of the session."""
    return str(kind) in CRITICAL_VIOLATIONS


# Mapping between the camelCase keys used by the browser monitor and our fields
_CAMEL_CASE_KEYS = {
    "devToolsDetection": "dev_tools_detection",
    "copyPastePrevention": "copy_paste_prevention",
    "contextMenuDisabled": "context_menu_disabled",
    "printPrevention": "print_prevention",
    "tabSwitchDetection": "tab_switch_detection",
    "fullscreenRequired": "fullscreen_required",
}


@dataclass(frozen=True)
class SecurityFeatureFlags:
    """
    Immutable set of monitor features enabled for one exam session.

    The flags are resolved once when the session starts and handed to the
    monitor explicitly; nothing reads them from global state afterwards.

    Attributes:
        enabled: Master switch, no listener is attached when False
        dev_tools_detection: Report developer tools shortcuts
        copy_paste_prevention: Block and report clipboard access
        context_menu_disabled: Block and report the context menu
        print_prevention: Block and report printing
        tab_switch_detection: Report tab/window focus loss (critical)
        fullscreen_required: Session needs fullscreen, leaving it is critical
    """

    enabled: bool = True
    dev_tools_detection: bool = True
    copy_paste_prevention: bool = True
    context_menu_disabled: bool = True
    print_prevention: bool = True
    tab_switch_detection: bool = True
    fullscreen_required: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SecurityFeatureFlags":
        """
        Builds the flag set from a settings mapping.

        Accepts both snake_case and the browser's camelCase keys; unknown keys
        are ignored and missing keys keep their defaults.
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        values: Dict[str, bool] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                values[name] = bool(value)
        return cls(**values)

    @classmethod
    def disabled(cls) -> "SecurityFeatureFlags":
        """Flag set with every listener switched off."""
        return cls(
            enabled=False,
            dev_tools_detection=False,
            copy_paste_prevention=False,
            context_menu_disabled=False,
            print_prevention=False,
            tab_switch_detection=False,
            fullscreen_required=False,
        )

    def is_enabled(self, feature: str) -> bool:
        """True if the master switch and the given feature are both on."""
        name = _CAMEL_CASE_KEYS.get(feature, feature)
        return self.enabled and bool(getattr(self, name, False))

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)

    def to_client_dict(self) -> Dict[str, bool]:
        """camelCase representation consumed by the browser monitor."""
        reverse = {snake: camel for camel, snake in _CAMEL_CASE_KEYS.items()}
        return {reverse.get(key, key): value for key, value in self.to_dict().items()}
