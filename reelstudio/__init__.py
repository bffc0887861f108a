"""Top-level package for Reel Studio.

This package provides the backend of a short-form video studio: project CRUD,
a proxy to the Coqui TTS inference API with audio storage, and caption text
helpers for the script editor. The HTTP entry point is
`reelstudio.web_api.create_app`.
"""

__version__ = "0.1.0"

from .captions.ass_text import ass_text_to_plain

__all__ = ["ass_text_to_plain", "__version__"]
