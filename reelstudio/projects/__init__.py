"""Project persistence, user-scoped CRUD actions, and the background asset library."""

from .actions import ProjectActions
from .assets import AssetActions, background_storage_path
from .store import ProjectStore

__all__ = ["AssetActions", "ProjectActions", "ProjectStore", "background_storage_path"]
