# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime, timedelta, timezone

import pytest

from photo_editor.core.exceptions import ErrorCode, NotFoundException, ValidationException
from photo_editor.models.photo_session import PhotoSession
from photo_editor.schemas.session import SessionUpdate
from photo_editor.services.photo_session import derive_title, photo_session_service


@pytest.mark.unit
class TestCreateOrReuse:
    def test_first_session_is_new(self, test_db, test_user_id):
        session, is_new = photo_session_service.create_or_reuse(
            test_db, user_id=test_user_id
        )

        assert is_new is True
        assert session.title == "New Chat"
        assert session.task_count == 0
        assert session.first_prompt is None

    def test_empty_latest_session_is_reused(self, test_db, test_user_id):
        first, _ = photo_session_service.create_or_reuse(test_db, user_id=test_user_id)

        second, is_new = photo_session_service.create_or_reuse(
            test_db, user_id=test_user_id
        )

        assert is_new is False
        assert second.id == first.id

    def test_latest_session_with_tasks_is_not_reused(self, test_db, test_user_id):
        first, _ = photo_session_service.create_or_reuse(test_db, user_id=test_user_id)
        photo_session_service.touch(test_db, first.id, title_seed="hello")

        second, is_new = photo_session_service.create_or_reuse(
            test_db, user_id=test_user_id
        )

        assert is_new is True
        assert second.id != first.id

    def test_sessions_of_other_users_are_not_reused(
        self, test_db, test_user_id, other_user_id
    ):
        mine, _ = photo_session_service.create_or_reuse(test_db, user_id=test_user_id)

        theirs, is_new = photo_session_service.create_or_reuse(
            test_db, user_id=other_user_id
        )

        assert is_new is True
        assert theirs.id != mine.id


@pytest.mark.unit
class TestTouch:
    def test_first_task_sets_title_and_first_prompt(self, test_db, photo_session):
        prompt = "A beautiful sunset over mountains"

        photo_session_service.touch(test_db, photo_session.id, title_seed=prompt)

        test_db.refresh(photo_session)
        assert photo_session.title == prompt[:10] + "..."
        assert photo_session.first_prompt == prompt
        assert photo_session.task_count == 1

    def test_later_tasks_keep_the_title(self, test_db, photo_session):
        photo_session_service.touch(
            test_db, photo_session.id, title_seed="A beautiful sunset over mountains"
        )
        test_db.refresh(photo_session)
        title = photo_session.title

        photo_session_service.touch(test_db, photo_session.id, title_seed="Add a moon")

        test_db.refresh(photo_session)
        assert photo_session.title == title
        assert photo_session.first_prompt == "A beautiful sunset over mountains"
        assert photo_session.task_count == 2

    def test_touch_advances_last_activity(self, test_db, photo_session):
        before = photo_session.last_activity - timedelta(seconds=1)
        test_db.query(PhotoSession).filter(PhotoSession.id == photo_session.id).update(
            {PhotoSession.last_activity: before}, synchronize_session=False
        )
        test_db.commit()

        photo_session_service.touch(test_db, photo_session.id, title_seed="x")

        test_db.refresh(photo_session)
        assert photo_session.last_activity > before


@pytest.mark.unit
@pytest.mark.parametrize(
    "prompt,expected",
    [
        ("Short", "Short"),
        ("Exactly10!", "Exactly10!"),
        ("Eleven char", "Eleven cha..."),
        ("  leading spaces", "  leading ..."),
    ],
)
def test_derive_title(prompt, expected):
    assert derive_title(prompt, max_length=10) == expected


@pytest.mark.unit
class TestListSessions:
    def test_most_recent_activity_first(self, test_db, test_user_id):
        older, _ = photo_session_service.create_or_reuse(test_db, user_id=test_user_id)
        photo_session_service.touch(test_db, older.id, title_seed="older")
        newer, _ = photo_session_service.create_or_reuse(test_db, user_id=test_user_id)
        test_db.query(PhotoSession).filter(PhotoSession.id == older.id).update(
            {PhotoSession.last_activity: datetime(2020, 1, 1)},
            synchronize_session=False,
        )
        test_db.commit()

        sessions = photo_session_service.list_sessions(test_db, user_id=test_user_id)

        assert [s.id for s in sessions] == [newer.id, older.id]

    def test_limit_applies(self, test_db, test_user_id):
        for prompt in ("one", "two", "three"):
            session, _ = photo_session_service.create_or_reuse(
                test_db, user_id=test_user_id
            )
            photo_session_service.touch(test_db, session.id, title_seed=prompt)

        sessions = photo_session_service.list_sessions(
            test_db, user_id=test_user_id, limit=2
        )

        assert len(sessions) == 2


@pytest.mark.unit
class TestUpdateSession:
    def test_update_title(self, test_db, photo_session, test_user_id):
        updated = photo_session_service.update_session(
            test_db,
            session_id=photo_session.id,
            user_id=test_user_id,
            obj_in=SessionUpdate(title="Renamed"),
        )

        assert updated.title == "Renamed"

    def test_aware_last_activity_is_stored_as_utc(
        self, test_db, photo_session, test_user_id
    ):
        aware = datetime(2025, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=8)))

        updated = photo_session_service.update_session(
            test_db,
            session_id=photo_session.id,
            user_id=test_user_id,
            obj_in=SessionUpdate(last_activity=aware),
        )

        assert updated.last_activity == datetime(2025, 6, 1, 4, 0)

    def test_empty_update_is_rejected(self, test_db, photo_session, test_user_id):
        with pytest.raises(ValidationException) as exc_info:
            photo_session_service.update_session(
                test_db,
                session_id=photo_session.id,
                user_id=test_user_id,
                obj_in=SessionUpdate(),
            )

        assert exc_info.value.status_code == 400

    def test_foreign_session_is_not_found(
        self, test_db, photo_session, other_user_id
    ):
        with pytest.raises(NotFoundException) as exc_info:
            photo_session_service.update_session(
                test_db,
                session_id=photo_session.id,
                user_id=other_user_id,
                obj_in=SessionUpdate(title="mine now"),
            )

        assert exc_info.value.error_code == ErrorCode.SESSION_NOT_FOUND
