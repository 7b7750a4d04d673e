"""
Auth database configuration.
Stores user accounts, roles and subscription state.
"""

DB_NAME = "auth_db"


class Collections:
    """Collection names in auth_db."""
    USERS = "users"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "User accounts, roles and subscriptions",
    "collections": [Collections.USERS, Collections.METADATA],
    "access_level": "restricted",
}
