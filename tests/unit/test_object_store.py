"""Unit tests for the filesystem object store and URL signing."""

from __future__ import annotations

import base64
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest

from reelstudio.errors import InvalidInputError, NotFoundError, PersistenceError
from reelstudio.io.object_store import ObjectStore, audio_data_url


@pytest.fixture
def store(tmp_path: Path) -> ObjectStore:
    return ObjectStore(
        tmp_path / "storage",
        "projects",
        public_base_url="https://studio.test/",
        signing_secret="secret",
    )


def test_upload_and_download_keep_content_type(store: ObjectStore, tmp_path: Path) -> None:
    """Uploaded bytes should round-trip with the content type they were stored with."""

    stored = store.upload("projects/u/p/audio/1.wav", b"RIFF", content_type="audio/wav")

    assert stored == "projects/u/p/audio/1.wav"
    assert (tmp_path / "storage" / "projects" / "projects/u/p/audio/1.wav").is_file()
    assert store.exists(stored)
    assert store.download(stored) == (b"RIFF", "audio/wav")


def test_upload_without_upsert_refuses_to_overwrite(store: ObjectStore) -> None:
    store.upload("a/b.wav", b"first")

    with pytest.raises(PersistenceError, match="already exists"):
        store.upload("a/b.wav", b"second")

    store.upload("a/b.wav", b"second", upsert=True)
    assert store.download("a/b.wav")[0] == b"second"


def test_download_missing_object_raises_not_found(store: ObjectStore) -> None:
    with pytest.raises(NotFoundError):
        store.download("missing.wav")


@pytest.mark.parametrize(
    "object_path",
    ["", "   ", "/etc/passwd", "../escape.wav", "a/../../b.wav", "a\\b.wav", "a/.hidden"],
)
def test_invalid_object_paths_are_rejected(store: ObjectStore, object_path: str) -> None:
    with pytest.raises(InvalidInputError):
        store.upload(object_path, b"x")


def test_public_url_quotes_object_path(store: ObjectStore) -> None:
    assert (
        store.get_public_url("oneoff/my file.wav")
        == "https://studio.test/storage/projects/oneoff/my%20file.wav"
    )


def test_signed_url_verifies_until_expiry(store: ObjectStore) -> None:
    """Signed URLs should carry an expiry and a token that verifies until then."""

    store.upload("u/p/audio/1.wav", b"RIFF")

    url = store.create_signed_url("u/p/audio/1.wav", 60, now=1000)

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
        "https://studio.test/storage/projects/u/p/audio/1.wav"
    )
    query = parse_qs(parts.query)
    expires = int(query["expires"][0])
    token = query["token"][0]
    assert expires == 1060
    assert store.verify_signature("u/p/audio/1.wav", expires, token, now=1059)
    assert not store.verify_signature("u/p/audio/1.wav", expires, token, now=1061)
    assert not store.verify_signature("u/p/audio/2.wav", expires, token, now=1000)
    assert not store.verify_signature("u/p/audio/1.wav", expires + 1, token, now=1000)


def test_signed_url_requires_existing_object_and_positive_lifetime(
    store: ObjectStore,
) -> None:
    with pytest.raises(NotFoundError):
        store.create_signed_url("nope.wav", 60)

    store.upload("yes.wav", b"x")
    with pytest.raises(InvalidInputError, match="must be positive"):
        store.create_signed_url("yes.wav", 0)


def test_signatures_depend_on_secret(tmp_path: Path) -> None:
    first = ObjectStore(tmp_path, "b", "https://s.test", signing_secret="one")
    second = ObjectStore(tmp_path, "b", "https://s.test", signing_secret="two")
    first.upload("x.wav", b"x")

    token = parse_qs(urlsplit(first.create_signed_url("x.wav", 60, now=0)).query)["token"][0]

    assert first.verify_signature("x.wav", 60, token, now=0)
    assert not second.verify_signature("x.wav", 60, token, now=0)


def test_audio_data_url_encodes_base64_payload() -> None:
    url = audio_data_url(b"RIFFdata")

    assert url.startswith("data:audio/wav;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == b"RIFFdata"


def test_upload_without_upsert_keeps_object_written_by_another_writer(
    store: ObjectStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Creation should be exclusive even when an existence check would have passed."""

    target = store.bucket_root / "a" / "race.wav"
    target.parent.mkdir(parents=True)
    target.write_bytes(b"winner")
    monkeypatch.setattr(ObjectStore, "exists", lambda self, object_path: False)

    with pytest.raises(PersistenceError, match="already exists"):
        store.upload("a/race.wav", b"loser")

    assert target.read_bytes() == b"winner"


def test_verify_signature_rejects_non_ascii_token(store: ObjectStore) -> None:
    store.upload("a/b.wav", b"x")

    assert not store.verify_signature("a/b.wav", 99_999_999_999, "é", now=0)
    assert not store.verify_signature("a/b.wav", 99_999_999_999, "", now=0)


def test_remove_deletes_object_and_content_type(store: ObjectStore) -> None:
    store.upload("a/clip.mp4", b"video", content_type="video/mp4")

    assert store.remove("a/clip.mp4") is True
    assert not store.exists("a/clip.mp4")
    assert list(store.bucket_root.rglob("*clip.mp4*")) == []
    assert store.remove("a/clip.mp4") is False
