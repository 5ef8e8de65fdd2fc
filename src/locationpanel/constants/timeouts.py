"""
Timeouts and Intervals Constants Module.
"""

from typing import Final


class TimeoutConstants:
    """Defines all timeout values used across the application."""
    # Delay before showing the main window, lets the event loop spin up (milliseconds)
    WINDOW_SHOW_DELAY_MS: Final[int] = 100

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate that all timeouts are non-negative."""
        for attr_name in dir(self):
            if attr_name.endswith("_MS"):
                value = getattr(self, attr_name)
                if not isinstance(value, (int, float)) or value < 0:
                    raise ValueError(f"{attr_name} must be a non-negative number.")


# Singleton instance for easy access
timeouts = TimeoutConstants()
