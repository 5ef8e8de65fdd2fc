"""
Views submodule for LocationPanel.
"""

from locationpanel.views.panel import LocationSettingsView

__all__ = ["LocationSettingsView"]
