import argparse
import random
import time

import numpy as np

from config.config_loader import load_navmesh_settings
from core.navmesh_manager import NavMesh
from utils.logger import configure_logging


def build_grid(width: int, height: int, wall_fraction: float, rng: random.Random) -> np.ndarray:
    grid = np.zeros((height, width), dtype=np.uint8)
    wall_target = int(width * height * wall_fraction)
    placed = 0
    while placed < wall_target:
        x = rng.randint(0, width - 1)
        y = rng.randint(0, height - 1)
        if grid[y, x]:
            continue
        # Grow short wall segments instead of isolated specks
        length = rng.randint(1, 4)
        horizontal = rng.random() < 0.5
        for step in range(length):
            wx, wy = (x + step, y) if horizontal else (x, y + step)
            if wx < width and wy < height and not grid[wy, wx] and placed < wall_target:
                grid[wy, wx] = 1
                placed += 1
    return grid


def random_pairs(grid: np.ndarray, count: int, rng: random.Random):
    free = np.argwhere(grid == 0)
    pairs = []
    if len(free) == 0:
        return pairs
    for _ in range(count):
        ay, ax = free[rng.randrange(len(free))]
        by, bx = free[rng.randrange(len(free))]
        pairs.append(((ax + 0.5, ay + 0.5), (bx + 0.5, by + 0.5)))
    return pairs


def run_benchmark(width: int, height: int, wall_fraction: float, samples: int, seed: int, actor_size: int = 1):
    rng = random.Random(seed)
    grid = build_grid(width, height, wall_fraction, rng)
    mesh = NavMesh(grid, actor_size=actor_size)

    t0 = time.perf_counter()
    mesh.build()
    t1 = time.perf_counter()

    pairs = random_pairs(grid, samples, rng)
    found = 0
    waypoints = 0
    t2 = time.perf_counter()
    for a, b in pairs:
        path = mesh.find_path(a, b)
        if path:
            found += 1
            waypoints += len(path)
    t3 = time.perf_counter()

    stats = mesh.stats()
    return {
        'width': width,
        'height': height,
        'walls_fraction': wall_fraction,
        'actor_size': actor_size,
        'samples': len(pairs),
        'area_count': stats['area_count'],
        'portal_count': stats['portal_count'],
        'build_time_s': t1 - t0,
        'search_time_s': t3 - t2,
        'paths_found': found,
        'avg_waypoints': waypoints / found if found else 0.0,
        'cells_per_area': (width * height) / stats['area_count'] if stats['area_count'] else 0.0,
    }


def main(argv=None):
    ap = argparse.ArgumentParser(description='Navmesh benchmark: decomposition and A* query timings')
    ap.add_argument('--width', type=int, default=128)
    ap.add_argument('--height', type=int, default=128)
    ap.add_argument('--walls', type=float, default=0.08, help='fraction of cells that are walls')
    ap.add_argument('--samples', type=int, default=500)
    ap.add_argument('--actor-size', type=int, default=None, help='defaults to the configured actor size')
    ap.add_argument('--seed', type=int, default=1337)
    ap.add_argument('--config', default=None, help='settings YAML (bundled config/settings.yaml if omitted)')
    args = ap.parse_args(argv)
    settings = load_navmesh_settings(args.config)
    configure_logging(settings.log_level)
    actor_size = args.actor_size if args.actor_size is not None else settings.actor_size
    if not 0.0 <= args.walls < 1.0:
        ap.error('--walls must lie in [0, 1)')
    result = run_benchmark(args.width, args.height, args.walls, args.samples, args.seed, actor_size)
    print('\n=== Navmesh Benchmark ===')
    for k, v in result.items():
        print(f'{k}: {v}')
    if result['samples']:
        print('\nSearch time per query: {:.6f} s'.format(result['search_time_s'] / result['samples']))
    return result


if __name__ == '__main__':
    main()
