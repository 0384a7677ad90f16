import httpx
import pytest

from task_tracker.client import TaskApi, TaskBoard

from .fakes import FakeTaskApi, make_task_json


@pytest.fixture()
def fake_api():
    return FakeTaskApi(
        [
            make_task_json("t2", "Second"),
            make_task_json("t1", "First", completed=True),
        ]
    )


@pytest.fixture()
def board(fake_api):
    b = TaskBoard(fake_api)
    assert b.load() is True
    return b


class TestLoad:
    def test_load_replaces_tasks(self, board):
        assert [t.id for t in board.tasks] == ["t2", "t1"]
        assert board.tasks[1].completed is True

    def test_load_failure_keeps_list_empty(self, fake_api):
        fake_api.fail.add("get_tasks")
        b = TaskBoard(fake_api)
        assert b.load() is False
        assert b.tasks == []


class TestSubmit:
    @pytest.mark.parametrize("draft", ["", "   "])
    def test_blank_draft_issues_no_request(self, board, fake_api, draft):
        before = list(board.tasks)
        fake_api.calls.clear()
        board.set_draft(draft)
        assert board.submit() is False
        assert fake_api.calls == []
        assert board.tasks == before

    def test_submit_appends_and_clears_draft(self, board, fake_api):
        board.set_draft("  Third ")
        assert board.submit() is True
        assert fake_api.calls[-1] == ("add_task", {"text": "  Third "})
        assert board.tasks[-1].text == "Third"
        assert board.draft_text == ""

    def test_submit_failure_keeps_draft_and_tasks(self, board, fake_api):
        fake_api.fail.add("add_task")
        before = list(board.tasks)
        board.set_draft("Third")
        assert board.submit() is False
        assert board.tasks == before
        assert board.draft_text == "Third"


class TestToggle:
    def test_toggle_flips_and_sends_new_value(self, board, fake_api):
        assert board.toggle("t2") is True
        assert board.find("t2").completed is True
        assert fake_api.calls[-1] == ("update_task", "t2", {"completed": True})

    def test_toggle_is_applied_before_request_and_reverted_on_failure(self, fake_api):
        seen = []
        b = TaskBoard(fake_api, on_change=lambda tasks: seen.append([t.completed for t in tasks]))
        b.load()
        before = list(b.tasks)
        fake_api.fail.add("update_task")

        assert b.toggle("t2") is False
        assert b.tasks == before
        # load, optimistic flip, rollback
        assert seen == [[False, True], [True, True], [False, True]]

    def test_toggle_unknown_id_issues_no_request(self, board, fake_api):
        fake_api.calls.clear()
        assert board.toggle("nope") is False
        assert fake_api.calls == []


class TestRemove:
    def test_remove(self, board, fake_api):
        assert board.remove("t1") is True
        assert [t.id for t in board.tasks] == ["t2"]
        assert fake_api.calls[-1] == ("delete_task", "t1")

    def test_remove_failure_restores_snapshot(self, board, fake_api):
        fake_api.fail.add("delete_task")
        before = list(board.tasks)
        assert board.remove("t1") is False
        assert board.tasks == before


class TestAgainstService:
    """TaskBoard driving the real service through TaskApi over the test client."""

    def test_full_cycle(self, client):
        api = TaskApi(client=client)
        board = TaskBoard(api)
        assert board.load() is True
        assert board.tasks == []

        board.set_draft("Buy milk")
        assert board.submit() is True
        board.set_draft("Walk dog")
        assert board.submit() is True
        milk, dog = board.tasks

        assert board.toggle(milk.id) is True
        assert board.remove(dog.id) is True

        fresh = TaskBoard(api)
        fresh.load()
        assert [(t.id, t.completed) for t in fresh.tasks] == [(milk.id, True)]

    def test_toggle_reverts_when_server_rejects(self, client):
        api = TaskApi(client=client)
        board = TaskBoard(api)
        board.set_draft("Gone soon")
        board.submit()
        task = board.tasks[0]

        # Deleted behind the board's back: the update gets a 404
        assert api.delete_task(task.id) == {"message": "Task deleted successfully"}
        assert board.toggle(task.id) is False
        assert board.tasks == [task]
        assert board.tasks[0].completed is False


class TestUndecodableResponses:
    """A 2xx reply that is not JSON (e.g. an HTML page from a proxy) counts as a failure."""

    @staticmethod
    def make_board(handler):
        http = httpx.Client(base_url="http://tasks.test", transport=httpx.MockTransport(handler))
        board = TaskBoard(TaskApi(client=http))
        return board

    @staticmethod
    def html_page(request):
        return httpx.Response(200, content=b"<html>proxy</html>", headers={"Content-Type": "text/html"})

    def test_toggle_reverts_on_html_body(self):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=[make_task_json("a", "One")])
            return self.html_page(request)

        board = self.make_board(handler)
        assert board.load() is True
        before = list(board.tasks)

        assert board.toggle("a") is False
        assert board.tasks == before
        assert board.tasks[0].completed is False

    def test_remove_reverts_on_html_body(self):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=[make_task_json("a", "One")])
            return self.html_page(request)

        board = self.make_board(handler)
        board.load()
        before = list(board.tasks)

        assert board.remove("a") is False
        assert board.tasks == before

    def test_load_and_submit_fail_quietly_on_html_body(self):
        board = self.make_board(self.html_page)
        assert board.load() is False
        assert board.tasks == []

        board.set_draft("New")
        assert board.submit() is False
        assert board.draft_text == "New"

    def test_load_rejects_malformed_task(self):
        board = self.make_board(lambda request: httpx.Response(200, json=[{"id": "a"}]))
        assert board.load() is False
        assert board.tasks == []
