"""
sidkik_firebase.emulator.routers

Per-system emulator routers.
"""

# Package marker.
