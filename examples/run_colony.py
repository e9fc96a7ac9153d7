#!/usr/bin/env python3
"""Play a scripted Apiary Sandbox colony and print results."""

import logging

from apiary.core.config import ColonyConfig
from apiary.core.engine import ColonySimulation
from apiary.core.hex_coords import ORIGIN, hex_distance, neighbors
from apiary.metrics.collector import MetricsCollector


def connect_flowers(sim: ColonySimulation) -> int:
    """Click for wax and lay one connector beside each unconnected flower.

    Only flowers with a free neighbour next to an already connected tile
    are handled; returns the number of connectors built.
    """
    built = 0
    connected = set(sim.reachable_resource_tiles())
    for flower in sim.all_resource_tiles():
        if flower in connected:
            continue
        for link in neighbors(flower):
            if sim.exists(link) or not sim.graph.is_adjacent_to_network(link):
                continue
            while not sim.economy.can_afford_connector():
                sim.click_tile(ORIGIN)
            sim.build_connector(link)
            built += 1
            break
    return built


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    config = ColonyConfig(experiment_name="scripted", random_seed=42)
    print(f"=== Apiary Sandbox: {config.experiment_name} ===")
    print(f"Grid radius: {config.grid_radius}")
    print(f"Initial flowers: {config.initial_flowers} at distance {config.initial_flower_distance}")
    print()

    sim = ColonySimulation(config)
    collector = MetricsCollector()

    print(f"{'Tick':>5} {'Wax':>5} {'Nectar':>6} {'Hive':>4} {'Flwr':>4} "
          f"{'Tiles':>5} {'Flowers':>7} {'Conn':>4} {'Exp':>3}")
    print("-" * 52)

    for _ in range(5):
        built = connect_flowers(sim)
        for flower in sim.reachable_resource_tiles():
            for _ in range(10):
                sim.click_tile(flower)
        while sim.economy.can_afford_worker():
            sim.spawn_worker()

        reports = sim.run(50)
        for report in reports:
            m = collector.collect(sim, report)
        expansions = sum(1 for r in reports if r.expansion is not None)
        print(
            f"{m.tick:5d} {m.wax:5d} {m.nectar:6d} {m.hive_workers:4d} "
            f"{m.flower_workers:4d} {m.tile_count:5d} {m.flower_count:7d} "
            f"{m.connected_flowers:4d} {expansions:3d}"
            f"  (+{built} connectors)"
        )

    summary = collector.summary()
    print()
    print(f"=== Final State (Tick {sim.current_tick}) ===")
    print(f"Expansions: {summary['expansions']}")
    print(f"Wax produced: {summary['total_wax_produced']}")
    print(f"Nectar produced: {summary['total_nectar_produced']}")
    print(f"Flowers: {len(sim.all_resource_tiles())} "
          f"({len(sim.reachable_resource_tiles())} connected)")

    far = max((hex_distance(ORIGIN, f) for f in sim.all_resource_tiles()), default=0)
    print(f"Farthest flower: {far} steps from the hive")


if __name__ == "__main__":
    main()
