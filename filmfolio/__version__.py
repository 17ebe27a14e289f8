"""Version information for filmfolio."""

# Semantic versioning: MAJOR.MINOR.PATCH
# MAJOR: Breaking changes to the persisted document layout or HTTP contract
# MINOR: New features, backward compatible
# PATCH: Bug fixes, backward compatible

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.3.0 - Backups, rollback and stale staging-file cleanup in the document store
#         - Reconciliation of upload directory against album documents
#         - Password rotation revokes every other session
# 0.2.0 - Injectable SessionStore replaces the module-level session cache
#         - Per-document lock table with locked read-modify-write
# 0.1.0 - Initial release: albums, site config, admin login
