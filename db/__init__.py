"""
db/ - Storage Layer
===================
Document-store abstraction, its PostgreSQL (JSONB) and in-memory backends,
the connection pool and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
