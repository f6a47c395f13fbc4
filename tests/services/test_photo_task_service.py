# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import timedelta

import pytest

from photo_editor.core.exceptions import ErrorCode, NotFoundException
from photo_editor.models.photo_task import PhotoTask, PhotoTaskStatus
from photo_editor.services.photo_task import photo_task_service
from photo_editor.utils.datetime_utils import utc_now


def _create_task(db, session_id, user_id, prompt="make it pop"):
    return photo_task_service.create_task(
        db,
        session_id=session_id,
        user_id=user_id,
        prompt=prompt,
        provider_model="google/nano-banana",
        credits_cost=8,
    )


@pytest.mark.unit
class TestCreateTask:
    def test_new_task_is_pending(self, test_db, photo_session, test_user_id):
        task = _create_task(test_db, photo_session.id, test_user_id)

        assert task.status == PhotoTaskStatus.PENDING
        assert task.provider_job_id is None
        assert task.completed_at is None
        assert task.output_image_url is None

    def test_sequence_order_follows_creation_order(
        self, test_db, photo_session, test_user_id
    ):
        tasks = [
            _create_task(test_db, photo_session.id, test_user_id, f"prompt {i}")
            for i in range(3)
        ]

        assert [task.sequence_order for task in tasks] == [1, 2, 3]

    def test_sequence_order_is_per_session(self, test_db, test_user_id):
        first = _create_task(test_db, "session-a", test_user_id)
        other = _create_task(test_db, "session-b", test_user_id)
        second = _create_task(test_db, "session-a", test_user_id)

        assert first.sequence_order == 1
        assert other.sequence_order == 1
        assert second.sequence_order == 2


@pytest.mark.unit
class TestGetTask:
    def test_owner_can_read_task(self, test_db, photo_session, test_user_id):
        task = _create_task(test_db, photo_session.id, test_user_id)

        assert photo_task_service.get_task(
            test_db, task_id=task.id, user_id=test_user_id
        ).id == task.id

    def test_non_owner_gets_same_error_as_missing_task(
        self, test_db, photo_session, test_user_id, other_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)

        with pytest.raises(NotFoundException) as foreign:
            photo_task_service.get_task(test_db, task_id=task.id, user_id=other_user_id)
        with pytest.raises(NotFoundException) as missing:
            photo_task_service.get_task(
                test_db, task_id="does-not-exist", user_id=other_user_id
            )

        assert foreign.value.status_code == missing.value.status_code == 404
        assert foreign.value.detail == missing.value.detail
        assert foreign.value.error_code == ErrorCode.TASK_NOT_FOUND


@pytest.mark.unit
class TestUpdateStatus:
    def test_terminal_transition_sets_completed_at(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)

        applied = photo_task_service.update_status(
            test_db,
            task.id,
            PhotoTaskStatus.COMPLETED,
            output_image_url="https://cdn.example.com/a.png",
        )

        test_db.refresh(task)
        assert applied is True
        assert task.status == PhotoTaskStatus.COMPLETED
        assert task.output_image_url == "https://cdn.example.com/a.png"
        assert task.completed_at is not None

    def test_repeated_terminal_transition_is_a_noop(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)
        photo_task_service.update_status(
            test_db,
            task.id,
            PhotoTaskStatus.COMPLETED,
            output_image_url="https://cdn.example.com/first.png",
        )
        test_db.refresh(task)
        completed_at = task.completed_at

        applied = photo_task_service.update_status(
            test_db,
            task.id,
            PhotoTaskStatus.COMPLETED,
            output_image_url="https://cdn.example.com/second.png",
        )

        test_db.refresh(task)
        assert applied is False
        assert task.output_image_url == "https://cdn.example.com/first.png"
        assert task.completed_at == completed_at

    @pytest.mark.parametrize(
        "later_status", [PhotoTaskStatus.PROCESSING, PhotoTaskStatus.FAILED]
    )
    def test_terminal_status_never_regresses(
        self, test_db, photo_session, test_user_id, later_status
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)
        photo_task_service.update_status(test_db, task.id, PhotoTaskStatus.COMPLETED)

        applied = photo_task_service.update_status(
            test_db, task.id, later_status, error_message="late signal"
        )

        test_db.refresh(task)
        assert applied is False
        assert task.status == PhotoTaskStatus.COMPLETED
        assert task.error_message is None

    def test_unknown_task_raises_not_found(self, test_db):
        with pytest.raises(NotFoundException):
            photo_task_service.update_status(
                test_db, "missing", PhotoTaskStatus.FAILED
            )


@pytest.mark.unit
class TestMarkDispatched:
    def test_pending_task_moves_to_processing(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)

        moved = photo_task_service.mark_dispatched(test_db, task.id, "pred-1")

        test_db.refresh(task)
        assert moved is True
        assert task.status == PhotoTaskStatus.PROCESSING
        assert task.provider_job_id == "pred-1"

    def test_terminal_task_keeps_status_but_records_job_id(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)
        photo_task_service.update_status(test_db, task.id, PhotoTaskStatus.FAILED)

        moved = photo_task_service.mark_dispatched(test_db, task.id, "pred-1")

        test_db.refresh(task)
        assert moved is False
        assert task.status == PhotoTaskStatus.FAILED
        assert task.provider_job_id == "pred-1"


@pytest.mark.unit
class TestFinalizationClaim:
    def test_only_one_claim_is_granted(self, test_db, photo_session, test_user_id):
        task = _create_task(test_db, photo_session.id, test_user_id)

        assert photo_task_service.claim_finalization(test_db, task.id) is True
        assert photo_task_service.claim_finalization(test_db, task.id) is False

    def test_released_claim_can_be_taken_again(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)
        photo_task_service.claim_finalization(test_db, task.id)

        photo_task_service.release_finalization(test_db, task.id)

        assert photo_task_service.claim_finalization(test_db, task.id) is True

    def test_expired_claim_can_be_taken_over(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)
        test_db.query(PhotoTask).filter(PhotoTask.id == task.id).update(
            {PhotoTask.finalize_claimed_at: utc_now() - timedelta(hours=1)},
            synchronize_session=False,
        )
        test_db.commit()

        assert photo_task_service.claim_finalization(test_db, task.id) is True

    def test_terminal_task_cannot_be_claimed(
        self, test_db, photo_session, test_user_id
    ):
        task = _create_task(test_db, photo_session.id, test_user_id)
        photo_task_service.update_status(test_db, task.id, PhotoTaskStatus.COMPLETED)

        assert photo_task_service.claim_finalization(test_db, task.id) is False


@pytest.mark.unit
def test_list_by_session_orders_by_sequence(test_db, photo_session, test_user_id):
    for i in range(3):
        _create_task(test_db, photo_session.id, test_user_id, f"prompt {i}")

    tasks = photo_task_service.list_by_session(
        test_db, session_id=photo_session.id, user_id=test_user_id
    )

    assert [task.prompt for task in tasks] == ["prompt 0", "prompt 1", "prompt 2"]
