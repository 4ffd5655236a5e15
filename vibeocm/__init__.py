"""
VibeOCM: AI-assisted organizational change management artifacts.
"""

__version__ = "0.1.0"
