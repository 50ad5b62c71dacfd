"""Event topics published by the navmesh."""
