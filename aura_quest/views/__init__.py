"""View-side helpers (views render state; the engine owns it)"""
from aura_quest.views.snapshot import StateSnapshot

__all__ = ["StateSnapshot"]
