"""
LocationPanel: a location settings panel.
"""
