"""
System database configuration.
Cross-database registry, background job log and system events.
"""

DB_NAME = "system_db"


class Collections:
    """Collection names in system_db."""
    DB_REGISTRY = "db_registry"
    JOBS = "jobs"
    EVENTS = "events"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Cross-database registry, job executions and system events",
    "collections": [
        Collections.DB_REGISTRY,
        Collections.JOBS,
        Collections.EVENTS,
        Collections.METADATA,
    ],
    "access_level": "system",
}
