# tests/v1/test_users_api.py
"""Tests for user endpoints."""

from fastapi import status


def test_save_profile_onboards_user(client, invalidator) -> None:
    response = client.put(
        "/api/v1/users/",
        json={"external_id": "ext_1", "username": "Carol", "name": "Carol", "path": "/onboarding"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["username"] == "carol"
    assert data["onboarded"] is True
    assert invalidator.stale_paths == []

    response = client.get("/api/v1/users/ext_1")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Carol"


def test_profile_edit_revalidates(client, test_user, invalidator) -> None:
    response = client.put(
        "/api/v1/users/",
        json={"external_id": "u1", "username": "alice", "name": "Alice B", "path": "/profile/edit"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert invalidator.stale_paths == ["/profile/edit"]


def test_get_missing_user(client) -> None:
    assert client.get("/api/v1/users/nobody").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/users/nobody/threads").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/users/nobody/activity").status_code == status.HTTP_404_NOT_FOUND


def test_list_users(client, test_user, other_user) -> None:
    response = client.get("/api/v1/users/", params={"exclude": "u1"})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [u["external_id"] for u in data["users"]] == ["u2"]
    assert data["has_next"] is False


def test_list_users_requires_exclude(client) -> None:
    response = client.get("/api/v1/users/")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_user_threads_and_activity(client, test_user, other_user, post_thread, reply) -> None:
    root = post_thread(test_user, text="mine")
    comment = reply(root, other_user, "hi alice")

    threads = client.get("/api/v1/users/u1/threads").json()
    assert [t["id"] for t in threads["threads"]] == [root]

    activity = client.get("/api/v1/users/u1/activity").json()
    assert [c["id"] for c in activity["comments"]] == [comment]
    assert activity["comments"][0]["author"]["external_id"] == "u2"


def test_activity_for_unknown_user(client) -> None:
    response = client.get("/api/v1/users/nobody/activity")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Failed to fetch activity: User nobody not found"
