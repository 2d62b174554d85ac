"""
Core business logic package for PUSHIN'.

Contains the AccessController state machine and the headless
PushinEngine that drives it. Zero UI dependencies.
"""

from core.controller import AccessController
from core.engine import PushinEngine
from core.state import AccessState

__all__ = ["AccessController", "AccessState", "PushinEngine"]
