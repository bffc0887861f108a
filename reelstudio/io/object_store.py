"""Object storage for generated audio.

Responsibilities:
- Persist binary objects under a filesystem-backed bucket.
- Issue public and HMAC-signed URLs, and verify signatures when serving.
- Encode anonymous audio as inline data URLs instead of storing it.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from pathlib import Path, PurePosixPath
from urllib.parse import quote, urlencode

from ..errors import InvalidInputError, NotFoundError, PersistenceError


def audio_data_url(data: bytes, content_type: str = "audio/wav") -> str:
    """Return `data` as a base64 data URL."""

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ObjectStore:
    """Filesystem-backed object bucket with signed URL support."""

    def __init__(
        self,
        root: Path,
        bucket: str,
        public_base_url: str,
        signing_secret: str,
    ) -> None:
        """Initialize the bucket rooted at `root / bucket`."""

        self.root = root
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self._signing_key = signing_secret.encode("utf-8")

    @property
    def bucket_root(self) -> Path:
        return self.root / self.bucket

    def upload(
        self,
        object_path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> str:
        """Store `data` at `object_path` and return the normalized path.

        Existing objects are kept unless `upsert` is set.
        """

        normalized = self.normalize_path(object_path)
        path = self.bucket_root / normalized
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb" if upsert else "xb") as handle:
                handle.write(data)
            self._content_type_path(path).write_text(
                json.dumps({"content_type": content_type}), encoding="utf-8"
            )
        except FileExistsError as exc:
            raise PersistenceError(f"Object `{normalized}` already exists.") from exc
        except OSError as exc:
            raise PersistenceError(f"Failed to upload `{normalized}`: {exc}") from exc
        return normalized

    def download(self, object_path: str) -> tuple[bytes, str]:
        """Return object bytes and their stored content type."""

        normalized = self.normalize_path(object_path)
        path = self.bucket_root / normalized
        if not path.is_file():
            raise NotFoundError(f"Object `{normalized}` not found.")
        content_type = "application/octet-stream"
        meta_path = self._content_type_path(path)
        if meta_path.is_file():
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
            content_type = str(meta.get("content_type") or content_type)
        return path.read_bytes(), content_type

    def remove(self, object_path: str) -> bool:
        """Delete an object and its metadata; return whether it existed."""

        normalized = self.normalize_path(object_path)
        path = self.bucket_root / normalized
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise PersistenceError(f"Failed to remove `{normalized}`: {exc}") from exc
        self._content_type_path(path).unlink(missing_ok=True)
        return True

    def exists(self, object_path: str) -> bool:
        return (self.bucket_root / self.normalize_path(object_path)).is_file()

    def get_public_url(self, object_path: str) -> str:
        normalized = self.normalize_path(object_path)
        return f"{self.public_base_url}/storage/{self.bucket}/{quote(normalized)}"

    def create_signed_url(
        self, object_path: str, expires_in: int, now: float | None = None
    ) -> str:
        """Return a URL for `object_path` valid for `expires_in` seconds."""

        if expires_in <= 0:
            raise InvalidInputError("Signed URL lifetime must be positive.")
        normalized = self.normalize_path(object_path)
        if not self.exists(normalized):
            raise NotFoundError(f"Object `{normalized}` not found.")
        expires = int(now if now is not None else time.time()) + expires_in
        query = urlencode({"expires": expires, "token": self._sign(normalized, expires)})
        return f"{self.get_public_url(normalized)}?{query}"

    def verify_signature(
        self, object_path: str, expires: int, token: str, now: float | None = None
    ) -> bool:
        """Return whether `token` is a valid, unexpired signature for the object."""

        normalized = self.normalize_path(object_path)
        current = now if now is not None else time.time()
        if expires < current:
            return False
        expected = self._sign(normalized, expires).encode("ascii")
        return hmac.compare_digest(expected, token.encode("utf-8"))

    def _sign(self, normalized_path: str, expires: int) -> str:
        message = f"{self.bucket}/{normalized_path}:{expires}".encode("utf-8")
        return hmac.new(self._signing_key, message, hashlib.sha256).hexdigest()

    @staticmethod
    def _content_type_path(path: Path) -> Path:
        return path.with_name(f".{path.name}.meta.json")

    @staticmethod
    def normalize_path(object_path: str) -> str:
        """Reject paths that are empty, absolute, or escape the bucket."""

        raw = (object_path or "").strip()
        if not raw or "\\" in raw or raw.startswith("/"):
            raise InvalidInputError(f"Invalid object path `{object_path}`.")
        parts = PurePosixPath(raw).parts
        if any(part in {"..", "."} or part.startswith(".") for part in parts):
            raise InvalidInputError(f"Invalid object path `{object_path}`.")
        return "/".join(parts)
