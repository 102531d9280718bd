"""
Procedural glass shattering: Voronoi-fractured panels extruded into
render meshes and convex colliders.
"""

from .core import Panel, Placement, Shatterer, ShatterResult, ShardRecord, spawn_panel

__version__ = "0.1.0"

__all__ = ['Panel', 'Placement', 'Shatterer', 'ShatterResult', 'ShardRecord', 'spawn_panel']
