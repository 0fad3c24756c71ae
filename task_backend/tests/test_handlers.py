import time
from datetime import datetime

import pytest

from src.task_api import handlers
from src.task_api.errors import InvalidInputError, TaskNotFoundError
from src.task_api.schemas import CreateTaskInput, DeleteTaskInput, UpdateTaskInput

from fakes import RecordingRepository


class TestCreateTaskHandler:
    def test_create_task(self, repo):
        result = handlers.create_task(repo, CreateTaskInput(name="Complete project documentation"))
        assert result.name == "Complete project documentation"
        assert result.completed is False
        assert isinstance(result.id, int)
        assert isinstance(result.created_at, datetime)

    def test_accepts_plain_mapping(self, repo):
        result = handlers.create_task(repo, {"name": "New task"})
        assert result.name == "New task"
        assert [t.id for t in handlers.get_tasks(repo)] == [result.id]

    @pytest.mark.parametrize(
        "name",
        [
            "Short task",
            "This is a much longer task name with many words and details",
            "Task with special characters: @#$%^&*()",
            "A" * 500,
            " ",
        ],
    )
    def test_names_stored_verbatim(self, repo, name):
        result = handlers.create_task(repo, {"name": name})
        assert result.name == name
        assert handlers.get_tasks(repo)[0].name == name

    def test_multiple_tasks_have_unique_ids(self, repo):
        tasks = [handlers.create_task(repo, {"name": n}) for n in ("First", "Second", "Third")]
        assert len({t.id for t in tasks}) == 3
        assert {t.name for t in handlers.get_tasks(repo)} == {"First", "Second", "Third"}

    def test_empty_name_never_reaches_store(self):
        repo = RecordingRepository()
        with pytest.raises(InvalidInputError) as excinfo:
            handlers.create_task(repo, {"name": ""})
        assert excinfo.value.issues[0]["loc"] == ["name"]
        assert repo.calls == []
        assert repo.select_all() == []


class TestGetTasksHandler:
    def test_empty(self, repo):
        assert handlers.get_tasks(repo) == []

    def test_newest_first(self, repo):
        handlers.create_task(repo, {"name": "Old Task"})
        time.sleep(0.01)
        handlers.create_task(repo, {"name": "New Task"})
        result = handlers.get_tasks(repo)
        assert [t.name for t in result] == ["New Task", "Old Task"]
        assert result[0].created_at >= result[1].created_at

    def test_completed_and_pending(self, repo):
        done = handlers.create_task(repo, {"name": "Completed Task"})
        handlers.create_task(repo, {"name": "Pending Task"})
        handlers.update_task(repo, {"id": done.id, "completed": True})
        by_name = {t.name: t for t in handlers.get_tasks(repo)}
        assert by_name["Completed Task"].completed is True
        assert by_name["Pending Task"].completed is False


class TestUpdateTaskHandler:
    def test_update_to_true_preserves_other_fields(self, repo):
        created = handlers.create_task(repo, {"name": "Preserve Data Test"})
        result = handlers.update_task(repo, UpdateTaskInput(id=created.id, completed=True))
        assert result.id == created.id
        assert result.name == created.name
        assert result.completed is True
        assert result.created_at == created.created_at

    def test_toggle_repeatedly(self, repo):
        created = handlers.create_task(repo, {"name": "Toggle Test Task"})
        for completed in (True, False, True, True):
            result = handlers.update_task(repo, {"id": created.id, "completed": completed})
            assert result.completed is completed
        assert handlers.get_tasks(repo)[0].completed is True

    def test_not_found_names_the_id(self, repo):
        with pytest.raises(TaskNotFoundError, match=r"Task with id 999 not found") as excinfo:
            handlers.update_task(repo, {"id": 999, "completed": True})
        assert excinfo.value.task_id == 999

    def test_invalid_input(self):
        repo = RecordingRepository()
        with pytest.raises(InvalidInputError):
            handlers.update_task(repo, {"id": 1})
        with pytest.raises(InvalidInputError):
            handlers.update_task(repo, {"id": True, "completed": True})
        assert repo.calls == []


class TestDeleteTaskHandler:
    def test_delete_existing(self, repo):
        created = handlers.create_task(repo, {"name": "Task to delete"})
        result = handlers.delete_task(repo, DeleteTaskInput(id=created.id))
        assert result.success is True
        assert handlers.get_tasks(repo) == []

    def test_delete_missing(self, repo):
        assert handlers.delete_task(repo, {"id": 999}).success is False

    def test_does_not_affect_other_tasks(self, repo):
        first = handlers.create_task(repo, {"name": "Task 1"})
        second = handlers.create_task(repo, {"name": "Task 2"})
        second = handlers.update_task(repo, {"id": second.id, "completed": True})

        assert handlers.delete_task(repo, {"id": first.id}).success is True
        assert handlers.get_tasks(repo) == [second]

    def test_invalid_input(self):
        repo = RecordingRepository()
        with pytest.raises(InvalidInputError):
            handlers.delete_task(repo, {"id": "1"})
        assert repo.calls == []
