# community_registry/api/v1/dependencies/__init__.py

from community_registry.api.v1.dependencies.auth import get_current_admin, require_admin

__all__ = ["get_current_admin", "require_admin"]
