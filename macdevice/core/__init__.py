# macdevice/core/__init__.py
"""
Core runtime pieces for macdevice: host model resolution and classification.
"""
from .hardware import model_identifier, battery_percent

__all__ = ["model_identifier", "battery_percent"]
