"""Unit tests for the cached :class:`NavMesh` facade."""

import threading
import time

import numpy as np
import pytest

import core.navmesh_manager as navmesh_manager
from config.config_loader import NavMeshSettings
from core.event_bus import EventBus
from core.events.topics import EventTopic
from core.navmesh_manager import NavMesh


@pytest.fixture
def search_calls(monkeypatch):
    calls = []
    original = navmesh_manager.find_path

    def _counting(*args, **kwargs):
        calls.append(args[1:3])
        return original(*args, **kwargs)

    monkeypatch.setattr(navmesh_manager, "find_path", _counting)
    return calls


class TestNavMeshBuild:
    def test_builds_lazily_on_first_query(self, open_grid) -> None:
        mesh = NavMesh(open_grid)
        assert mesh.last_build_seconds == 0.0
        assert mesh.find_path((1, 1), (6, 6)) == [(6, 6)]
        assert len(mesh.areas) == 1

    def test_area_at(self, walled_grid) -> None:
        mesh = NavMesh(walled_grid)
        area = mesh.area_at((1.5, 1.5))
        assert (area.x, area.y, area.width, area.height) == (0, 0, 4, 4)
        assert mesh.area_at((1.5, 4.5)) is None

    def test_stats(self, walled_grid) -> None:
        mesh = NavMesh(walled_grid)
        mesh.build()
        stats = mesh.stats()
        assert stats["free_cells"] == 56
        assert stats["area_count"] == len(mesh.areas)
        assert stats["portal_count"] == sum(len(a.points) for a in mesh.areas)
        assert stats["cache_size"] == 0

    def test_settings_override_actor_size(self, gap_grid) -> None:
        mesh = NavMesh.from_settings(gap_grid, NavMeshSettings(actor_size=2))
        assert mesh.actor_size == 2
        assert mesh.find_path((1.5, 1.5), (6.5, 6.5)) == []

    def test_build_publishes_event(self, walled_grid) -> None:
        bus = EventBus()
        events = []
        bus.subscribe(EventTopic.NAVMESH_BUILT, lambda **payload: events.append(payload))
        mesh = NavMesh(walled_grid, event_bus=bus)
        areas = mesh.build()
        assert len(events) == 1
        assert events[0]["area_count"] == len(areas)
        assert events[0]["portal_count"] == sum(len(a.points) for a in areas)
        assert events[0]["elapsed"] >= 0.0


class TestNavMeshPathCache:
    def test_cache_hit_skips_search(self, walled_grid, search_calls) -> None:
        mesh = NavMesh(walled_grid)
        first = mesh.find_path((1.5, 6.5), (6.5, 7.5))
        second = mesh.find_path((1.5, 6.5), (6.5, 7.5))
        assert first == second
        assert len(search_calls) == 1
        assert len(mesh.path_cache) == 1

    def test_returned_path_is_a_copy(self, walled_grid) -> None:
        mesh = NavMesh(walled_grid)
        path = mesh.find_path((1.5, 6.5), (6.5, 7.5))
        path.clear()
        assert mesh.find_path((1.5, 6.5), (6.5, 7.5)) != []

    def test_lru_eviction(self, open_grid) -> None:
        mesh = NavMesh(open_grid, settings=NavMeshSettings(max_cache_size=2))
        mesh.find_path((0, 0), (1, 1))
        mesh.find_path((0, 0), (2, 2))
        mesh.find_path((0, 0), (1, 1))  # refresh recency
        mesh.find_path((0, 0), (3, 3))
        keys = list(mesh.path_cache)
        assert keys == [((0.0, 0.0), (1.0, 1.0)), ((0.0, 0.0), (3.0, 3.0))]

    def test_zero_cache_size_disables_cache(self, open_grid, search_calls) -> None:
        mesh = NavMesh(open_grid, settings=NavMeshSettings(max_cache_size=0))
        mesh.find_path((0, 0), (1, 1))
        mesh.find_path((0, 0), (1, 1))
        assert len(search_calls) == 2
        assert len(mesh.path_cache) == 0

    def test_update_grid_rebuilds_and_invalidates(self, open_grid) -> None:
        mesh = NavMesh(open_grid)
        assert mesh.find_path((1.5, 1.5), (1.5, 6.5)) == [(1.5, 6.5)]
        walled = open_grid.copy()
        walled[4, :] = 1
        mesh.update_grid(walled)
        assert len(mesh.path_cache) == 0
        assert mesh.find_path((1.5, 1.5), (1.5, 6.5)) == []

    def test_path_events(self, walled_grid) -> None:
        bus = EventBus()
        found, unreachable = [], []
        bus.subscribe(EventTopic.PATH_FOUND, lambda **p: found.append(p))
        bus.subscribe(EventTopic.PATH_UNREACHABLE, lambda **p: unreachable.append(p))
        mesh = NavMesh(walled_grid, event_bus=bus)

        mesh.find_path((1.5, 6.5), (6.5, 7.5))
        mesh.find_path((1.5, 6.5), (6.5, 7.5))
        mesh.find_path((1.5, 1.5), (1.5, 6.5))

        assert [p["cached"] for p in found] == [False, True]
        assert found[0]["path"][-1] == (6.5, 7.5)
        assert unreachable == [{"start": (1.5, 1.5), "finish": (1.5, 6.5)}]

    def test_concurrent_queries_share_graph(self, walled_grid) -> None:
        mesh = NavMesh(walled_grid)
        mesh.build()
        expected = mesh.find_path((1.5, 6.5), (6.5, 7.5))
        mesh.clear_cache()
        results = []

        def worker():
            for _ in range(20):
                results.append(mesh.find_path((1.5, 6.5), (6.5, 7.5)))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(results) == 80
        assert all(r == expected for r in results)


def test_numpy_and_list_grids_build_the_same_mesh(walled_grid) -> None:
    from_array = NavMesh(walled_grid)
    from_list = NavMesh(walled_grid.tolist())
    rects = lambda mesh: [(a.x, a.y, a.width, a.height) for a in mesh.areas]
    assert rects(from_array) == rects(from_list)
    assert isinstance(from_list.blocked, np.ndarray)


class TestNavMeshRebuildRace:
    def test_search_on_replaced_graph_is_not_cached(self, open_grid, monkeypatch) -> None:
        mesh = NavMesh(open_grid)
        mesh.build()
        searched = threading.Event()
        resume = threading.Event()
        original = navmesh_manager.find_path
        paused = []

        def _pause_first_search(*args, **kwargs):
            path = original(*args, **kwargs)
            if not paused:
                paused.append(path)
                searched.set()
                assert resume.wait(5)
            return path

        monkeypatch.setattr(navmesh_manager, "find_path", _pause_first_search)
        stale = []
        reader = threading.Thread(
            target=lambda: stale.append(mesh.find_path((1.5, 1.5), (1.5, 6.5)))
        )
        reader.start()
        assert searched.wait(5)

        walled = open_grid.copy()
        walled[4, :] = 1
        mesh.update_grid(walled)
        resume.set()
        reader.join(5)

        assert stale == [[(1.5, 6.5)]]
        assert len(mesh.path_cache) == 0
        assert mesh.find_path((1.5, 1.5), (1.5, 6.5)) == []

    def test_concurrent_first_queries_build_once(self, walled_grid, monkeypatch) -> None:
        bus = EventBus()
        built = []
        bus.subscribe(EventTopic.NAVMESH_BUILT, lambda **p: built.append(p))
        mesh = NavMesh(walled_grid, event_bus=bus)
        original = navmesh_manager.decompose
        barrier = threading.Barrier(4)

        def _slow_decompose(*args, **kwargs):
            time.sleep(0.05)
            return original(*args, **kwargs)

        monkeypatch.setattr(navmesh_manager, "decompose", _slow_decompose)

        def worker():
            barrier.wait(5)
            mesh.find_path((1.5, 6.5), (6.5, 7.5))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)
        assert len(built) == 1
        assert mesh.generation == 1

    def test_update_grid_bumps_generation(self, open_grid) -> None:
        mesh = NavMesh(open_grid)
        assert mesh.generation == 0
        mesh.build()
        mesh.update_grid(open_grid)
        assert mesh.generation == 2
