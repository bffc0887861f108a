"""Unit tests for the background asset library."""

from __future__ import annotations

import io
from itertools import count
from pathlib import Path

import pytest

from reelstudio.errors import (
    InvalidInputError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
)
from reelstudio.io.object_store import ObjectStore
from reelstudio.projects import AssetActions, ProjectStore, background_storage_path
from reelstudio.telemetry import EventLogger


@pytest.fixture
def log_sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def object_store(tmp_path: Path) -> ObjectStore:
    return ObjectStore(tmp_path / "storage", "projects", "https://studio.test", "secret")


@pytest.fixture
def assets(tmp_path: Path, object_store: ObjectStore, log_sink: io.StringIO) -> AssetActions:
    ticks = count(1)
    ids = count(1)
    store = ProjectStore(
        tmp_path / "projects.json",
        clock=lambda: f"2026-01-01T00:00:{next(ticks):02d}.000000Z",
        id_factory=lambda: f"asset-{next(ids)}",
    )
    return AssetActions(store, object_store, EventLogger(sink=log_sink))


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("beach.MP4", "backgrounds/u1/1700_beach.mp4"),
        ("my clip (final).mov", "backgrounds/u1/1700_my_clip__final_.mov"),
        ("noextension", "backgrounds/u1/1700_noextension.mp4"),
        (".mp4", "backgrounds/u1/1700__mp4.mp4"),
        ("x" * 80 + ".webm", f"backgrounds/u1/1700_{'x' * 50}.webm"),
    ],
)
def test_background_storage_path_sanitizes_file_names(filename: str, expected: str) -> None:
    assert background_storage_path("u1", filename, now_ms=1700) == expected


def test_create_asset_uploads_and_records_tags(
    assets: AssetActions, object_store: ObjectStore, log_sink: io.StringIO
) -> None:
    asset = assets.create_asset(
        "u1", " Beach ", "beach.mp4", b"video", "video/mp4", tags="sea, summer,,", now_ms=42
    )

    assert asset.title == "Beach"
    assert asset.storage_path == "backgrounds/u1/42_beach.mp4"
    assert asset.tags == ("sea", "summer")
    assert object_store.download(asset.storage_path) == (b"video", "video/mp4")
    assert "stage=assets event=created asset_id=asset-1 size_bytes=5" in log_sink.getvalue()


def test_create_asset_checks_sign_in_before_fields(assets: AssetActions) -> None:
    with pytest.raises(UnauthorizedError, match="Unauthorized"):
        assets.create_asset(None, None, None, None)
    with pytest.raises(InvalidInputError, match="Title and file are required"):
        assets.create_asset("u1", "  ", "beach.mp4", b"video")
    with pytest.raises(InvalidInputError, match="Title and file are required"):
        assets.create_asset("u1", "Beach", "beach.mp4", b"")


def test_create_asset_removes_upload_when_record_fails(
    assets: AssetActions,
    object_store: ObjectStore,
    log_sink: io.StringIO,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A failed insert must not leave an orphaned object in the bucket."""

    def _fail(*args: object, **kwargs: object) -> None:
        raise PersistenceError("disk full")

    monkeypatch.setattr(assets.store, "insert_background_asset", _fail)

    with pytest.raises(PersistenceError, match="disk full"):
        assets.create_asset("u1", "Beach", "beach.mp4", b"video", now_ms=7)

    assert not object_store.exists("backgrounds/u1/7_beach.mp4")
    assert "stage=assets event=failure error_type=PersistenceError" in log_sink.getvalue()


def test_assets_are_scoped_to_their_owner(assets: AssetActions, object_store: ObjectStore) -> None:
    mine = assets.create_asset("u1", "Mine", "a.mp4", b"a", tags="sea", now_ms=1)
    theirs = assets.create_asset("u2", "Theirs", "b.mp4", b"b", tags="sea", now_ms=2)

    assert assets.list_assets("u1") == [mine]
    with pytest.raises(NotFoundError, match="Asset not found"):
        assets.delete_asset("u1", theirs.id)
    with pytest.raises(NotFoundError, match="Asset not found"):
        assets.update_asset_tags("u1", theirs.id, ["stolen"])
    with pytest.raises(UnauthorizedError, match="Authentication required to list assets"):
        assets.list_assets(None)

    assert object_store.exists(theirs.storage_path)


def test_list_assets_filters_by_tag_and_limits(assets: AssetActions) -> None:
    beach = assets.create_asset("u1", "Beach", "a.mp4", b"a", tags="sea", now_ms=1)
    assets.create_asset("u1", "City", "b.mp4", b"b", tags="urban", now_ms=2)
    harbour = assets.create_asset("u1", "Harbour", "c.mp4", b"c", tags="sea,urban", now_ms=3)

    assert assets.list_assets("u1", tag="sea") == [harbour, beach]
    assert assets.list_assets("u1", tag=" ") == assets.list_assets("u1")
    assert assets.list_assets("u1", limit=1) == [harbour]
    with pytest.raises(InvalidInputError, match="`limit` must be a positive integer"):
        assets.list_assets("u1", limit=0)


def test_delete_asset_removes_object_and_record(
    assets: AssetActions, object_store: ObjectStore
) -> None:
    asset = assets.create_asset("u1", "Beach", "a.mp4", b"a", now_ms=1)

    assets.delete_asset("u1", asset.id)

    assert not object_store.exists(asset.storage_path)
    assert assets.list_assets("u1") == []


def test_update_asset_tags_drops_blank_entries(assets: AssetActions) -> None:
    asset = assets.create_asset("u1", "Beach", "a.mp4", b"a", tags="old", now_ms=1)

    updated = assets.update_asset_tags("u1", asset.id, [" sea ", "", "sunset"])

    assert updated.tags == ("sea", "sunset")
    assert assets.list_assets("u1", tag="old") == []


def test_signed_url_is_none_for_missing_object(
    assets: AssetActions, object_store: ObjectStore, log_sink: io.StringIO
) -> None:
    asset = assets.create_asset("u1", "Beach", "a.mp4", b"a", now_ms=1)
    url = assets.signed_url(asset)
    assert url is not None and url.startswith(
        "https://studio.test/storage/projects/backgrounds/u1/1_a.mp4?"
    )

    object_store.remove(asset.storage_path)

    assert assets.signed_url(asset) is None
    assert "stage=assets event=object_missing asset_id=asset-1" in log_sink.getvalue()
