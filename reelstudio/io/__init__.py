"""Object storage for generated audio and rendered assets."""

from .object_store import ObjectStore, audio_data_url

__all__ = ["ObjectStore", "audio_data_url"]
