"""Integration tests for the background asset library routes."""

from __future__ import annotations

from fastapi.testclient import TestClient

OWNER = {"X-User-Id": "u1"}


def _upload(client: TestClient, title: str, name: str, tags: str = "", headers=OWNER):
    return client.post(
        "/api/assets",
        data={"title": title, "tags": tags},
        files={"file": (name, b"video-bytes", "video/mp4")},
        headers=headers,
    )


def test_asset_routes_require_sign_in(api_client: TestClient) -> None:
    listed = api_client.get("/api/assets")
    uploaded = _upload(api_client, "Beach", "beach.mp4", headers={})

    assert listed.status_code == 401
    assert listed.json() == {"error": "Authentication required to list assets"}
    assert uploaded.status_code == 401
    assert api_client.delete("/api/assets/any").status_code == 401


def test_upload_requires_title_and_file(api_client: TestClient) -> None:
    response = api_client.post("/api/assets", data={"title": "Beach"}, headers=OWNER)

    assert response.status_code == 400
    assert response.json() == {"error": "Title and file are required"}


def test_upload_list_and_download_asset(api_client: TestClient) -> None:
    """Uploaded assets should be listed with a signed URL that serves the bytes."""

    created = _upload(api_client, "Beach", "Beach Day.MP4", tags="sea, summer")

    assert created.status_code == 201
    asset = created.json()["asset"]
    assert asset["title"] == "Beach"
    assert asset["tags"] == ["sea", "summer"]
    assert asset["storage_path"].startswith("backgrounds/u1/")
    assert asset["storage_path"].endswith("_Beach_Day.mp4")

    listing = api_client.get("/api/assets", params={"tag": "sea"}, headers=OWNER).json()
    assert listing["total"] == 1
    assert listing["tag"] == "sea"
    listed = listing["assets"][0]
    assert listed["id"] == asset["id"]
    download = api_client.get(listed["public_url"].removeprefix("https://studio.test"))
    assert download.status_code == 200
    assert download.content == b"video-bytes"

    assert api_client.get("/api/assets", params={"tag": "urban"}, headers=OWNER).json() == {
        "assets": [],
        "total": 0,
        "tag": "urban",
    }


def test_other_users_cannot_touch_an_asset(api_client: TestClient) -> None:
    asset_id = _upload(api_client, "Beach", "beach.mp4").json()["asset"]["id"]
    intruder = {"X-User-Id": "u2"}

    deleted = api_client.delete(f"/api/assets/{asset_id}", headers=intruder)
    retagged = api_client.patch(
        f"/api/assets/{asset_id}/tags", json={"tags": ["mine"]}, headers=intruder
    )

    assert deleted.status_code == 404
    assert deleted.json() == {"error": "Asset not found"}
    assert retagged.status_code == 404
    assert api_client.get("/api/assets", headers=intruder).json()["total"] == 0
    assert api_client.get("/api/assets", headers=OWNER).json()["total"] == 1


def test_update_tags_and_delete_asset(api_client: TestClient) -> None:
    asset = _upload(api_client, "Beach", "beach.mp4", tags="old").json()["asset"]

    retagged = api_client.patch(
        f"/api/assets/{asset['id']}/tags", json={"tags": ["sea", " "]}, headers=OWNER
    )
    assert retagged.status_code == 200
    assert retagged.json()["asset"]["tags"] == ["sea"]

    assert api_client.delete(f"/api/assets/{asset['id']}", headers=OWNER).json() == {
        "success": True
    }
    assert api_client.get("/api/assets", headers=OWNER).json()["total"] == 0
    assert not api_client.app.state.object_store.exists(asset["storage_path"])


def test_video_asset_must_reference_an_owned_background(api_client: TestClient) -> None:
    background_id = _upload(api_client, "Beach", "beach.mp4").json()["asset"]["id"]
    project_id = api_client.post(
        "/api/projects", json={"title": "Reel"}, headers=OWNER
    ).json()["project"]["id"]
    body = {"storage_path": "v/1.mp4", "background_asset_id": background_id}

    saved = api_client.post(f"/api/projects/{project_id}/video", json=body, headers=OWNER)
    unknown = api_client.post(
        f"/api/projects/{project_id}/video",
        json={**body, "background_asset_id": "missing"},
        headers=OWNER,
    )

    assert saved.status_code == 200
    assert saved.json()["asset"]["background_asset_id"] == background_id
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Background asset not found"}
