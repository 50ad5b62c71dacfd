"""Canonical registry of event bus topics published by the navmesh.

Each entry is declared as a :class:`~enum.Enum` member and documents the
producer, the intended consumers and the payload guarantees for the associated
event.  Importing modules should rely on the enum members (e.g.
``topics.EventTopic.NAVMESH_BUILT``) to avoid drifting topic names.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["EventTopic"]


class EventTopic(str, Enum):
    """Enumeration of every topic published on the event bus."""

    NAVMESH_BUILT = "NavMeshBuilt"
    """Published by :class:`core.navmesh_manager.NavMesh` after a (re)build.

    Subscribers: renderers caching area overlays, debug tooling.
    Guarantees: provides ``area_count``, ``portal_count`` and ``elapsed``
    (seconds spent decomposing and pointizing).
    """

    PATH_FOUND = "PathFound"
    """Published by :class:`core.navmesh_manager.NavMesh` for a non-empty path.

    Subscribers: actor movement systems, path renderers.
    Guarantees: includes ``start``, ``finish``, ``path`` (list of waypoints)
    and ``cached`` (whether the path came from the path cache).
    """

    PATH_UNREACHABLE = "PathUnreachable"
    """Published by :class:`core.navmesh_manager.NavMesh` for an empty path.

    Subscribers: AI controllers choosing another destination.
    Guarantees: includes ``start`` and ``finish``.
    """

