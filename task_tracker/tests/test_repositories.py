import json

import pytest

from src.api.errors import NotFoundError, StorageError, ValidationError
from src.api.repositories import InMemoryRepository, JsonFileRepository, sort_newest_first


@pytest.fixture(params=["json", "memory"])
def any_repo(request, tmp_path, clock):
    """Each contract test runs against both storage backends."""
    if request.param == "json":
        return JsonFileRepository(tmp_path / "tasks.json", clock=clock)
    return InMemoryRepository(clock=clock)


class TestCreate:
    @pytest.mark.parametrize("raw", ["Buy milk", "  padded  ", "\tTabbed\n", "Ünïcode ✓"])
    def test_title_is_trimmed(self, any_repo, raw):
        created = any_repo.create(raw)
        assert created["title"] == raw.strip()
        assert created["completed"] is False

    @pytest.mark.parametrize(
        "bad, message",
        [
            (None, "Title is required and must be a string"),
            ("", "Title is required and must be a string"),
            (42, "Title is required and must be a string"),
            (["list"], "Title is required and must be a string"),
            ("   ", "Title cannot be empty"),
            ("\n\t", "Title cannot be empty"),
        ],
    )
    def test_invalid_titles_leave_store_unchanged(self, any_repo, bad, message):
        any_repo.create("existing")
        before = any_repo.list_all()
        with pytest.raises(ValidationError) as exc:
            any_repo.create(bad)
        assert exc.value.message == message
        assert exc.value.status_code == 400
        assert any_repo.list_all() == before

    def test_assigns_unique_ids_and_clock_time(self, any_repo, clock):
        a = any_repo.create("A")
        b = any_repo.create("B")
        assert a["id"] != b["id"]
        assert a["created_at_ms"] == clock.start
        assert b["created_at_ms"] == clock.start + clock.step

    def test_returned_entity_is_a_copy(self, any_repo):
        created = any_repo.create("Original")
        created["title"] = "Mutated"
        assert any_repo.list_all()[0]["title"] == "Original"


class TestListAll:
    def test_newest_first(self, any_repo):
        any_repo.create("A")
        any_repo.create("B")
        any_repo.create("C")
        listed = any_repo.list_all()
        assert [t["title"] for t in listed] == ["C", "B", "A"]
        stamps = [t["created_at_ms"] for t in listed]
        assert stamps == sorted(stamps, reverse=True)

    def test_same_millisecond_lists_later_insert_first(self, tmp_path):
        repo = JsonFileRepository(tmp_path / "tasks.json", clock=lambda: 5)
        repo.create("A")
        repo.create("B")
        assert [t["title"] for t in repo.list_all()] == ["B", "A"]

    def test_sort_newest_first_helper(self):
        items = [
            {"id": "1", "title": "old", "completed": False, "created_at_ms": 1},
            {"id": "2", "title": "new", "completed": False, "created_at_ms": 3},
            {"id": "3", "title": "mid", "completed": True, "created_at_ms": 2},
        ]
        assert [t["id"] for t in sort_newest_first(items)] == ["2", "3", "1"]


class TestToggle:
    def test_toggle_flips_once_per_call(self, any_repo):
        task = any_repo.create("X")
        once = any_repo.toggle(task["id"])
        assert once["completed"] is True
        twice = any_repo.toggle(task["id"])
        assert twice == task

    def test_toggle_keeps_created_at_and_order(self, any_repo):
        x = any_repo.create("X")
        y = any_repo.create("Y")
        toggled = any_repo.toggle(x["id"])
        assert toggled["created_at_ms"] == x["created_at_ms"]
        assert [t["id"] for t in any_repo.list_all()] == [y["id"], x["id"]]

    def test_toggle_unknown_raises_not_found(self, any_repo):
        any_repo.create("X")
        before = any_repo.list_all()
        with pytest.raises(NotFoundError) as exc:
            any_repo.toggle("zzz")
        assert exc.value.message == "Task not found"
        assert exc.value.status_code == 404
        assert any_repo.list_all() == before


class TestDelete:
    def test_delete_removes_task(self, any_repo):
        keep = any_repo.create("keep")
        gone = any_repo.create("gone")
        any_repo.delete(gone["id"])
        assert [t["id"] for t in any_repo.list_all()] == [keep["id"]]

    def test_delete_unknown_raises_not_found(self, any_repo):
        any_repo.create("X")
        before = any_repo.list_all()
        with pytest.raises(NotFoundError):
            any_repo.delete("zzz")
        assert any_repo.list_all() == before


class TestJsonFile:
    def test_missing_file_is_empty(self, tmp_path):
        repo = JsonFileRepository(tmp_path / "absent" / "tasks.json")
        assert repo.list_all() == []
        assert not repo.path.exists()

    def test_creates_parent_directory_and_writes_camel_case(self, tmp_path, clock):
        path = tmp_path / "nested" / "dir" / "tasks.json"
        repo = JsonFileRepository(path, clock=clock, id_factory=lambda: "fixed-id")
        repo.create("Write me")
        assert json.loads(path.read_text(encoding="utf-8")) == [
            {"id": "fixed-id", "title": "Write me", "completed": False, "createdAtMs": clock.start}
        ]

    def test_reads_what_another_instance_wrote(self, tmp_path):
        path = tmp_path / "tasks.json"
        first = JsonFileRepository(path)
        created = first.create("shared")
        second = JsonFileRepository(path)
        assert second.list_all() == [created]

    @pytest.mark.parametrize(
        "content",
        [
            b"{not json",
            b"\xff\xfe garbage",
            json.dumps({"id": "x"}).encode(),
            json.dumps([{"id": "x", "title": "missing fields"}]).encode(),
            json.dumps([{"id": "x", "title": "", "completed": False, "createdAtMs": 1}]).encode(),
            json.dumps([{"id": "x", "title": "   ", "completed": False, "createdAtMs": 1}]).encode(),
        ],
    )
    def test_bad_content_raises_storage_error(self, tmp_path, content):
        path = tmp_path / "tasks.json"
        path.write_bytes(content)
        repo = JsonFileRepository(path)
        with pytest.raises(StorageError):
            repo.list_all()
        with pytest.raises(StorageError):
            repo.create("anything")
        assert path.read_bytes() == content

    def test_unwritable_path_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        repo = JsonFileRepository(blocker / "tasks.json")
        with pytest.raises(StorageError):
            repo.create("cannot persist")
