"""Configuration model and loaders for Reel Studio.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `StudioConfig`: normalized runtime settings for the API server and CLI.
- `ConfigLoader`: static construction helpers for `StudioConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_csv_list, parse_required_boolean


DEFAULT_COQUI_API_BASE_URL = "https://abhirooprasad--coqui-apis-fastapi-app.modal.run"
_DEFAULT_SIGNED_URL_TTL_SECONDS = 31_536_000
DEFAULT_SIGNING_SECRET = "change-me-in-production"


@dataclass(slots=True)
class StudioConfig:
    """Runtime configuration for the studio API and CLI.

    Attributes:
        coqui_api_base_url: Base URL of the external TTS inference API.
        data_dir: Root directory for the project store and object bucket.
        storage_bucket: Object bucket name for generated audio.
        storage_public: Whether unsigned public URLs are served for the bucket.
        public_base_url: Externally reachable base URL used to build object URLs.
        signing_secret: HMAC secret for signed object URLs.
        signed_url_ttl_seconds: Lifetime of signed audio URLs.
        voice_timeout_seconds: Per-attempt timeout for retried voice API reads.
        voice_max_retries: Attempt budget for retried voice API reads.
        voice_retry_backoff_seconds: Base delay for exponential retry backoff.
        host: Bind address for `serve`.
        port: Bind port for `serve`.
        debug: Expose interactive API docs when enabled.
        cors_origins: Allowed CORS origins.
    """

    coqui_api_base_url: str = DEFAULT_COQUI_API_BASE_URL
    data_dir: Path = Path("data")
    storage_bucket: str = "projects"
    storage_public: bool = True
    public_base_url: str = "http://localhost:8000"
    signing_secret: str = DEFAULT_SIGNING_SECRET
    signed_url_ttl_seconds: int = _DEFAULT_SIGNED_URL_TTL_SECONDS
    voice_timeout_seconds: float = 30.0
    voice_max_retries: int = 3
    voice_retry_backoff_seconds: float = 1.0
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def projects_db_path(self) -> Path:
        return self.data_dir / "projects.json"

    @property
    def storage_root(self) -> Path:
        return self.data_dir / "storage"

    def validate(self) -> None:
        """Validate runtime configuration values before use."""

        self._require_non_empty(self.coqui_api_base_url, "coqui_api_base_url")
        self._require_non_empty(self.storage_bucket, "storage_bucket")
        self._require_non_empty(self.public_base_url, "public_base_url")
        self._require_non_empty(self.signing_secret, "signing_secret")
        if "/" in self.storage_bucket or self.storage_bucket in {".", ".."}:
            raise ValueError("`storage_bucket` must be a single path segment.")
        if self.signed_url_ttl_seconds <= 0:
            raise ValueError("`signed_url_ttl_seconds` must be a positive integer.")
        if self.voice_timeout_seconds <= 0:
            raise ValueError("`voice_timeout_seconds` must be positive.")
        if self.voice_max_retries <= 0:
            raise ValueError("`voice_max_retries` must be a positive integer.")
        if self.voice_retry_backoff_seconds < 0:
            raise ValueError("`voice_retry_backoff_seconds` must not be negative.")
        if not 0 < self.port < 65536:
            raise ValueError("`port` must be between 1 and 65535.")

    def with_overrides(self, **changes: Any) -> StudioConfig:
        """Return a validated copy with selected fields replaced."""

        updated = replace(self, **changes)
        updated.validate()
        return updated

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `StudioConfig` from external sources."""

    _STRING_KEYS = (
        "coqui_api_base_url",
        "storage_bucket",
        "public_base_url",
        "signing_secret",
        "host",
    )
    _POSITIVE_INT_KEYS = ("signed_url_ttl_seconds", "voice_max_retries", "port")
    _FLOAT_KEYS = ("voice_timeout_seconds", "voice_retry_backoff_seconds")
    _BOOLEAN_KEYS = ("storage_public", "debug")
    _SUPPORTED_YAML_KEYS = frozenset(
        {
            *_STRING_KEYS,
            *_POSITIVE_INT_KEYS,
            *_FLOAT_KEYS,
            *_BOOLEAN_KEYS,
            "data_dir",
            "cors_origins",
        }
    )
    _ENV_KEYS = {
        "coqui_api_base_url": "COQUI_API_BASE_URL",
        "data_dir": "REELSTUDIO_DATA_DIR",
        "storage_bucket": "REELSTUDIO_STORAGE_BUCKET",
        "storage_public": "REELSTUDIO_STORAGE_PUBLIC",
        "public_base_url": "REELSTUDIO_PUBLIC_BASE_URL",
        "signing_secret": "REELSTUDIO_SIGNING_SECRET",
        "signed_url_ttl_seconds": "REELSTUDIO_SIGNED_URL_TTL_SECONDS",
        "voice_timeout_seconds": "REELSTUDIO_VOICE_TIMEOUT_SECONDS",
        "voice_max_retries": "REELSTUDIO_VOICE_MAX_RETRIES",
        "voice_retry_backoff_seconds": "REELSTUDIO_VOICE_RETRY_BACKOFF_SECONDS",
        "host": "REELSTUDIO_HOST",
        "port": "REELSTUDIO_PORT",
        "debug": "REELSTUDIO_DEBUG",
        "cors_origins": "REELSTUDIO_CORS_ORIGINS",
    }

    @staticmethod
    def from_yaml(path: Path) -> StudioConfig:
        """Create a validated config from a YAML file."""

        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"YAML `{path}` includes unsupported key(s): {key_list}.")

        return ConfigLoader._build_config(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> StudioConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload = {
            key: env_map[env_key]
            for key, env_key in ConfigLoader._ENV_KEYS.items()
            if normalize_optional_string(env_map.get(env_key)) is not None
        }
        return ConfigLoader._build_config(payload, source_label="Environment")

    @staticmethod
    def _build_config(payload: Mapping[str, Any], source_label: str) -> StudioConfig:
        """Build a validated config from a normalized mapping payload."""

        values: dict[str, Any] = {}
        for key in ConfigLoader._STRING_KEYS:
            value = normalize_optional_string(payload.get(key))
            if value is not None:
                values[key] = value
        for key in ConfigLoader._POSITIVE_INT_KEYS:
            if key in payload:
                values[key] = ConfigLoader._positive_int(payload[key], key, source_label)
        for key in ConfigLoader._FLOAT_KEYS:
            if key in payload:
                values[key] = ConfigLoader._non_negative_float(payload[key], key, source_label)
        for key in ConfigLoader._BOOLEAN_KEYS:
            if key in payload:
                values[key] = ConfigLoader._boolean(payload[key], key, source_label)

        data_dir = normalize_optional_string(payload.get("data_dir"))
        if data_dir is not None:
            values["data_dir"] = Path(data_dir)
        if "cors_origins" in payload:
            values["cors_origins"] = ConfigLoader._string_list(
                payload["cors_origins"], "cors_origins", source_label
            )

        if "coqui_api_base_url" in values:
            values["coqui_api_base_url"] = values["coqui_api_base_url"].rstrip("/")
        if "public_base_url" in values:
            values["public_base_url"] = values["public_base_url"].rstrip("/")

        config = StudioConfig(**values)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label} config is invalid: {exc}") from exc
        return config

    @staticmethod
    def _positive_int(raw_value: object, key: str, source_label: str) -> int:
        """Parse a positive integer value."""

        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            try:
                parsed = int(normalized or "")
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc
        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _non_negative_float(raw_value: object, key: str, source_label: str) -> float:
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a number.")
        try:
            parsed = float(str(raw_value).strip())
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a number.") from exc
        if parsed < 0:
            raise ValueError(f"{source_label} field `{key}` must not be negative.")
        return parsed

    @staticmethod
    def _boolean(raw_value: object, key: str, source_label: str) -> bool:
        try:
            return parse_required_boolean(raw_value, key)  # type: ignore[arg-type]
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _string_list(raw_value: object, key: str, source_label: str) -> list[str]:
        """Accept a YAML list or a comma-separated string."""

        if isinstance(raw_value, (list, tuple)):
            items = [normalize_optional_string(item) for item in raw_value]
            if any(item is None for item in items):
                raise ValueError(f"{source_label} field `{key}` contains a blank entry.")
            return [item for item in items if item is not None]
        items = parse_csv_list(raw_value)
        if not items:
            raise ValueError(f"{source_label} field `{key}` must list at least one origin.")
        return items
