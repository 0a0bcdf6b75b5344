"""
church_api.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories (one per aggregate) and the shared pagination helper.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories flush but never commit; services own the transaction boundary.
