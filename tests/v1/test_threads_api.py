# tests/v1/test_threads_api.py
"""Tests for thread endpoints."""

from fastapi import status

from threadline.core.settings import settings


def test_create_and_get_thread(client, test_user, invalidator) -> None:
    response = client.post(
        "/api/v1/threads/",
        json={"text": "hello", "author_id": test_user.id, "path": "/"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    thread_id = response.json()["id"]

    response = client.get(f"/api/v1/threads/{thread_id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["text"] == "hello"
    assert data["author"]["external_id"] == "u1"
    assert data["children"] == []
    assert invalidator.stale_paths == ["/"]


def test_get_missing_thread(client) -> None:
    response = client.get("/api/v1/threads/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_thread_blank_text(client, test_user) -> None:
    response = client.post("/api/v1/threads/", json={"text": "", "author_id": test_user.id})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_create_thread_unknown_author(client) -> None:
    response = client.post("/api/v1/threads/", json={"text": "hi", "author_id": 999})
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"].startswith("Failed to create thread")


def test_create_thread_unknown_community(client, test_user) -> None:
    response = client.post(
        "/api/v1/threads/",
        json={"text": "hi", "author_id": test_user.id, "community_id": "org_missing"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_threads(client, test_user, post_thread) -> None:
    first = post_thread(test_user, text="one")
    second = post_thread(test_user, text="two")

    response = client.get("/api/v1/threads/", params={"page": 1, "page_size": 1})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [p["id"] for p in data["posts"]] == [second]
    assert data["has_next"] is True

    response = client.get("/api/v1/threads/", params={"page": 2, "page_size": 1})
    data = response.json()
    assert [p["id"] for p in data["posts"]] == [first]
    assert data["has_next"] is False


def test_list_threads_rejects_bad_page(client) -> None:
    response = client.get("/api/v1/threads/", params={"page": 0})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


def test_comment_and_delete(client, test_user, other_user, post_thread, invalidator) -> None:
    root = post_thread(test_user)

    response = client.post(
        f"/api/v1/threads/{root}/comments",
        json={"text": "nice!", "user_id": other_user.id, "path": f"/thread/{root}"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    comment = response.json()["id"]

    detail = client.get(f"/api/v1/threads/{root}").json()
    assert [c["id"] for c in detail["children"]] == [comment]

    response = client.delete(f"/api/v1/threads/{root}", params={"path": "/"})
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/threads/{root}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/v1/threads/{comment}").status_code == status.HTTP_404_NOT_FOUND
    assert invalidator.stale_paths[-1] == "/"


def test_comment_on_missing_thread(client, test_user) -> None:
    response = client.post(
        "/api/v1/threads/4242/comments",
        json={"text": "anyone?", "user_id": test_user.id},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_missing_thread(client) -> None:
    response = client.delete("/api/v1/threads/4242")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_too_deep_is_unprocessable(
    client, test_user, other_user, post_thread, reply, monkeypatch
) -> None:
    """Domain validation errors share the 422 status with request validation."""
    monkeypatch.setattr(settings, "cascade_max_depth", 1)
    root = post_thread(test_user)
    reply(reply(root, other_user), test_user)

    response = client.delete(f"/api/v1/threads/{root}")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert response.json()["detail"].startswith("Failed to delete thread")
    assert client.get(f"/api/v1/threads/{root}").status_code == status.HTTP_200_OK
