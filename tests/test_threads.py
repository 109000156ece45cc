"""Tests for thread creation, replies and the single-thread fetch."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from threadline.core.errors import (
    CommunityNotFound,
    StoreOperationFailed,
    ThreadNotFound,
    UserNotFound,
    ValidationFailed,
)
from threadline.core.settings import settings
from threadline.repositories import CommunityRepository, ThreadRepository, UserRepository
from threadline.services import thread_service


def test_create_thread_round_trip(db_session, test_user, post_thread, invalidator) -> None:
    thread_id = post_thread(test_user, text="hello")

    thread = thread_service.fetch_thread_by_id(db_session, thread_id)

    assert thread is not None
    assert thread.text == "hello"
    assert thread.parent_id is None
    assert thread.author.external_id == "u1"
    assert thread.community is None
    assert thread.children == []
    assert thread_id in UserRepository(db_session).thread_ids(test_user.id)
    assert invalidator.stale_paths == ["/"]


def test_create_thread_in_community(db_session, test_user, community, post_thread) -> None:
    thread_id = post_thread(test_user, text="for the group", community_id=community.external_id)

    thread = thread_service.fetch_thread_by_id(db_session, thread_id)

    assert thread.community is not None
    assert thread.community.external_id == community.external_id
    assert thread_id in CommunityRepository(db_session).thread_ids(community.id)
    assert thread_id in UserRepository(db_session).thread_ids(test_user.id)


def test_unresolved_community_is_rejected(db_session, test_user, post_thread) -> None:
    with pytest.raises(CommunityNotFound, match="Failed to create thread"):
        post_thread(test_user, community_id="org_missing")

    assert UserRepository(db_session).thread_ids(test_user.id) == set()
    assert thread_service.fetch_posts(db_session, 1, 10).posts == []


def test_unresolved_community_allowed_by_setting(
    db_session, test_user, post_thread, monkeypatch, caplog
) -> None:
    monkeypatch.setattr(settings, "allow_unresolved_community", True)

    with caplog.at_level("WARNING", logger="threadline.services.thread_service"):
        thread_id = post_thread(test_user, community_id="org_missing")

    thread = thread_service.fetch_thread_by_id(db_session, thread_id)
    assert thread.community is None
    assert "org_missing" in caplog.text


def test_blank_text_is_rejected(db_session, test_user, post_thread, invalidator) -> None:
    with pytest.raises(ValidationFailed):
        post_thread(test_user, text="   ")
    assert invalidator.stale_paths == []


def test_unknown_author_is_rejected(db_session) -> None:
    with pytest.raises(UserNotFound, match="Failed to create thread"):
        thread_service.create_thread(db_session, text="orphan", author_id=999)


def test_comment_links_parent_and_child(
    db_session, test_user, other_user, post_thread, reply, invalidator
) -> None:
    root = post_thread(test_user, text="root")
    comment = reply(root, other_user, "nice!")

    threads = ThreadRepository(db_session)
    assert threads.get_by_id(comment).parent_id == root
    assert threads.child_ids_of([root]) == {comment}
    assert invalidator.stale_paths[-1] == f"/thread/{root}"


def test_comment_is_not_indexed_under_its_author(
    db_session, test_user, other_user, post_thread, reply
) -> None:
    """Replies only live in the parent's children set."""
    root = post_thread(test_user)
    comment = reply(root, other_user)

    assert comment not in UserRepository(db_session).thread_ids(other_user.id)


def test_add_child_is_idempotent(db_session, test_user, other_user, post_thread, reply) -> None:
    root = post_thread(test_user)
    comment = reply(root, other_user)

    threads = ThreadRepository(db_session)
    assert threads.add_child(root, comment) is False
    db_session.commit()
    assert threads.child_ids_of([root]) == {comment}


def test_comment_on_missing_thread(db_session, test_user) -> None:
    with pytest.raises(ThreadNotFound, match="Failed to add comment"):
        thread_service.add_comment_to_thread(
            db_session, thread_id=12345, text="hello?", user_id=test_user.id
        )


def test_comment_by_missing_user_writes_nothing(db_session, test_user, post_thread) -> None:
    root = post_thread(test_user)

    with pytest.raises(UserNotFound):
        thread_service.add_comment_to_thread(
            db_session, thread_id=root, text="ghost", user_id=999
        )

    assert ThreadRepository(db_session).child_ids_of([root]) == set()


def test_comment_failure_rolls_back_reply_and_link(
    db_session, test_user, other_user, post_thread
) -> None:
    """The reply row and the children entry are committed together or not at all."""
    root = post_thread(test_user)
    threads = ThreadRepository(db_session)

    boom = OperationalError("INSERT INTO thread_children", {}, Exception("database is locked"))
    with patch.object(ThreadRepository, "add_child", side_effect=boom):
        with pytest.raises(StoreOperationFailed, match="Failed to add comment"):
            thread_service.add_comment_to_thread(
                db_session, thread_id=root, text="lost", user_id=other_user.id
            )

    assert threads.replies_to([root]) == []
    assert threads.child_ids_of([root]) == set()

    comment = thread_service.add_comment_to_thread(
        db_session, thread_id=root, text="second try", user_id=other_user.id
    )

    assert [t.id for t in threads.replies_to([root])] == [comment]
    assert threads.child_ids_of([root]) == {comment}
    detail = thread_service.fetch_thread_by_id(db_session, root)
    assert [c.id for c in detail.children] == [comment]


def test_fetch_missing_thread_returns_none(db_session) -> None:
    assert thread_service.fetch_thread_by_id(db_session, 424242) is None


def test_fetch_thread_expands_two_levels(
    db_session, test_user, other_user, post_thread, reply
) -> None:
    root = post_thread(test_user, text="root")
    child = reply(root, other_user, "child")
    grandchild = reply(child, test_user, "grandchild")
    reply(grandchild, other_user, "great-grandchild")

    thread = thread_service.fetch_thread_by_id(db_session, root)

    assert [c.id for c in thread.children] == [child]
    assert thread.children[0].author.external_id == "u2"
    assert [g.id for g in thread.children[0].children] == [grandchild]
    assert thread.children[0].children[0].text == "grandchild"
    assert thread.children[0].children[0].author.external_id == "u1"
    # Third level is not expanded.
    assert not hasattr(thread.children[0].children[0], "children")
