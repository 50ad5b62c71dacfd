"""Area navmesh engine and the services built around it."""

__version__ = "0.1.0"
