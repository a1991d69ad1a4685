"""A button that remembers the time it was last pressed."""

from __future__ import annotations

from dataclasses import dataclass, field

ACTIVE_STYLE = "background-color: red"
INACTIVE_STYLE = "background-color: none"


@dataclass
class TimestampButton:
    """Timestamp button state: whether it is highlighted and when it fired."""

    save_on_click: bool
    text: str = ""
    timestamp: int = 0
    style_sheet: str = field(default="", init=False)
    _active: bool = field(default=False, init=False, repr=False)

    @property
    def active(self) -> bool:
        """Whether the button is highlighted."""
        return self._active

    @active.setter
    def active(self, value: bool) -> None:
        self._active = bool(value)
        self.style_sheet = ACTIVE_STYLE if self._active else INACTIVE_STYLE