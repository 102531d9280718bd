#!/usr/bin/env python3
"""
Demonstration of panel shattering.

Spawns a 20 x 5 x 0.1 panel at 2 cells per unit, shatters it at an impact
point and prints statistics about the resulting shards.
"""

import numpy as np

from py_shatter.config import settings
from py_shatter.core import Shatterer, ShardRegistry, spawn_panel
from py_shatter.utils.logging_config import configure_logging


def main():
    configure_logging(settings.log_level, settings.log_format)

    print("=== Panel Shattering Demo ===\n")

    # 1. Spawn a panel with placeholder geometry
    print("1. Spawning panel...")
    instance = spawn_panel(20.0, 5.0, 0.1, cells_per_unit=2.0,
                           translation=(0.0, 3.0, -10.0), material="red-glass")
    panel = instance.panel
    print(f"   - Grid: {panel.grid.nx} x {panel.grid.ny} ({panel.shard_count} shards expected)")
    print(f"   - Placeholder mesh triangles: {instance.mesh.triangle_count}")
    print(f"   - Placeholder collider volume: {instance.collider.volume:.3f}")

    # 2. Shatter with hooks
    print("\n2. Shattering at world point (1, 3, -10)...")
    shatterer = Shatterer(seed="demo_seed")
    registry = ShardRegistry()
    shatterer.add_shatter_hook(registry)
    result = shatterer.shatter_instance(instance, world_impact_point=(1.0, 3.0, -10.0))
    print(f"   - Shards created: {len(result)}")
    print(f"   - Panel state: {panel.state.value}")
    print(f"   - Source panel action: {result.source_action.value}")
    print(f"   - Impact point (panel-local): {result.impact_point}")

    # 3. Shard statistics
    print("\n3. Shard statistics...")
    areas = np.array([shard.cell.area for shard in result])
    volumes = np.array([shard.collider.volume for shard in result])
    triangles = np.array([shard.mesh.triangle_count for shard in result])
    print(f"   - Footprint area: total={areas.sum():.4f} (panel {panel.width * panel.height:.4f})")
    print(f"   - Footprint area: min={areas.min():.4f}, max={areas.max():.4f}")
    print(f"   - Collider volume: min={volumes.min():.5f}, max={volumes.max():.5f}")
    print(f"   - Triangles per shard: min={triangles.min()}, max={triangles.max()}")

    # 4. Shards near the impact
    print("\n4. Shards within 1.5 units of the impact...")
    near = result.within(1.5)
    print(f"   - {len(near)} shards")
    for shard in result.nearest(count=3):
        print(f"   - shard {shard.index}: seed={np.round(shard.position, 3)}, "
              f"distance={shard.distance_to(result.impact_point):.3f}")

    print(f"\n5. Registry holds {len(registry.shards_of(panel.id))} shards for panel {panel.id}")


if __name__ == "__main__":
    main()
