"""
app/sources/terrain.py
Simulated SRTM elevation grids plus the terrain analysis built on them.
Grids are GRID_SIZE × GRID_SIZE lists of metres, indexed grid[x][z].
"""

import math
import random
from typing import Optional

GRID_SIZE        = 32
WORLD_SPAN_M     = 400     # grid maps onto a 400 m square in the 3D scene
MAX_CELL_DELTA_M = 8.0     # steeper than this within the window → not farmable
MAX_WINDOW_DELTA = 30.0
WINDOW_RADIUS    = 2       # 5×5 neighbourhood


def elevation_grid(lat: float, lng: float, rng: Optional[random.Random] = None) -> list[list[float]]:
    """Coordinate-shaped terrain: layered sine noise plus random peaks."""
    rng = rng or random.Random()
    seed = abs(lat * lng * 1000) % 1000
    grid = []
    for x in range(GRID_SIZE):
        row = []
        for z in range(GRID_SIZE):
            nx = (x + seed) * 0.15
            nz = (z + seed) * 0.15
            elevation = abs(lat) * 2
            elevation += math.sin(nx) * math.cos(nz) * 30
            elevation += math.sin(nx * 2) * math.cos(nz * 2) * 15
            elevation += math.sin(nx * 4) * math.cos(nz * 4) * 8
            elevation += (rng.random() - 0.5) * 12
            if rng.random() > 0.85:
                elevation += rng.random() * 25
            row.append(max(0.0, elevation))
        grid.append(row)
    return grid


def farmable_areas(grid: list[list[float]]) -> list[dict]:
    """Cells whose 5×5 neighbourhood is flat enough to farm, with a 0–1 suitability."""
    if not grid:
        return []
    size = len(grid)
    areas = []
    for x in range(WINDOW_RADIUS, size - WINDOW_RADIUS):
        for z in range(WINDOW_RADIUS, size - WINDOW_RADIUS):
            center = grid[x][z]
            total = 0.0
            flat = True
            for dx in range(-WINDOW_RADIUS, WINDOW_RADIUS + 1):
                for dz in range(-WINDOW_RADIUS, WINDOW_RADIUS + 1):
                    delta = abs(grid[x + dx][z + dz] - center)
                    total += delta
                    if delta > MAX_CELL_DELTA_M:
                        flat = False
                        break
                if not flat:
                    break
            if flat and total < MAX_WINDOW_DELTA:
                areas.append({
                    "x":           (x / size - 0.5) * WORLD_SPAN_M,
                    "z":           (z / size - 0.5) * WORLD_SPAN_M,
                    "elevation":   center,
                    "suitability": max(0.0, 1 - total / MAX_WINDOW_DELTA),
                })
    return areas


def recommended_crops(lat: float, lng: float) -> list[str]:
    """Latitude-band climate guess."""
    if 30 <= lat <= 50:
        return ["corn", "soybeans", "wheat"]
    if 20 <= lat < 30:
        return ["cotton", "rice", "sugarcane"]
    if 0 <= lat < 20:
        return ["coffee", "cocoa", "bananas"]
    return ["wheat", "barley", "potatoes"]


def grid_stats(grid: list[list[float]]) -> dict:
    cells = [v for row in grid for v in row]
    if not cells:
        return {"min": None, "max": None, "mean": None, "relief": None, "terrainClass": "unknown"}
    lo, hi = min(cells), max(cells)
    relief = hi - lo
    if relief < 20:
        terrain = "flat"
    elif relief < 60:
        terrain = "rolling"
    else:
        terrain = "hilly"
    return {
        "min":          round(lo, 1),
        "max":          round(hi, 1),
        "mean":         round(sum(cells) / len(cells), 1),
        "relief":       round(relief, 1),
        "terrainClass": terrain,
    }


def bounds(lat: float, lng: float, span: float = 0.01) -> dict:
    return {"north": lat + span, "south": lat - span, "east": lng + span, "west": lng - span}
