"""
Squidex CLI tests - run commands in-process against a faked gateway.

stdout is captured by pytest, so every command runs in pipe (JSON) mode.
"""

import io
import json

import pytest

from squidex_cli import cli

BASE_URL = "http://gateway.test"


@pytest.fixture(autouse=True)
def cli_env(monkeypatch):
    """Keep the CLI hermetic: no .env loading, base URL from the environment."""
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setenv("SQUIDEX_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("SQUIDEX_RETRIES", "0")


def run(capsys, *args: str) -> tuple[int, dict]:
    """Run the CLI and return (exit code, parsed JSON output)."""
    code = 0
    try:
        cli.main(list(args))
    except SystemExit as e:
        code = e.code or 0
    out = capsys.readouterr().out
    return code, json.loads(out) if out.strip() else {}


def content_item(content_id: str) -> dict:
    return {"id": content_id, "data": {"title": {"iv": "T"}}, "version": 2, "status": "Draft"}


class TestQueryCommand:
    def test_compiles_flags_in_order(self, capsys):
        code, output = run(
            capsys,
            "query",
            "--eq", "data/difficulty/iv=easy",
            "--contains", "data/title/iv=math",
            "--orderby", "created desc",
            "--top", "20",
            "--skip", "5",
            "--search", "algebra",
        )  # fmt: skip
        assert code == 0
        assert output == {
            "$filter": "data/difficulty/iv eq 'easy' and contains(data/title/iv, 'math')",
            "$orderby": "created desc",
            "$top": 20,
            "$skip": 5,
            "$search": "algebra",
        }

    def test_typed_values(self, capsys):
        _, output = run(
            capsys,
            "query",
            "--eq", "data/level/iv=3",
            "--ne", "data/active/iv=false",
            "--ge", "data/score/iv=1.5",
            "--in", "data/tag/iv=a,b,2",
            "--filter", "data/x/iv eq null",
        )  # fmt: skip
        assert output["$filter"] == (
            "data/level/iv eq 3 and data/active/iv ne false and data/score/iv ge 1.5 "
            "and data/tag/iv in ('a','b',2) and data/x/iv eq null"
        )

    def test_orderby_default_direction(self, capsys):
        _, output = run(capsys, "query", "--orderby", "created")
        assert output == {"$orderby": "created asc"}

    def test_empty_query(self, capsys):
        assert run(capsys, "query") == (0, {})

    def test_non_numeric_comparison(self, capsys):
        code, output = run(capsys, "query", "--gt", "data/score/iv=high")
        assert code == 1
        assert "expects a number" in output["error"]

    def test_malformed_assignment(self, capsys):
        code, output = run(capsys, "query", "--eq", "nofield")
        assert code == 1
        assert "field=value" in output["error"]

    def test_does_not_need_base_url(self, capsys, monkeypatch):
        monkeypatch.delenv("SQUIDEX_API_BASE_URL")
        assert run(capsys, "query", "--top", "1") == (0, {"$top": 1})


class TestContentCommands:
    def test_list_with_top(self, capsys, server):
        server.queue({"total": 5, "items": [content_item("a")]})
        code, output = run(capsys, "content", "list", "questions", "--eq", "data/difficulty/iv=easy", "--top", "1")
        assert code == 0
        assert output["total"] == 5
        assert output["items"][0]["id"] == "a"
        assert "$filter=data%2Fdifficulty%2Fiv%20eq%20%27easy%27" in server.last.full_url

    def test_list_paginates_all_in_pipe_mode(self, capsys, server):
        server.queue({"total": 2, "items": [content_item("a"), content_item("b")]})
        _, output = run(capsys, "content", "list", "questions")
        assert [i["id"] for i in output["items"]] == ["a", "b"]
        assert output["total"] == 2

    def test_get(self, capsys, server):
        server.queue(content_item("a"))
        code, output = run(capsys, "content", "get", "questions", "a")
        assert code == 0
        assert output["id"] == "a"
        assert output["version"] == 2

    def test_get_not_found(self, capsys, server, http_error):
        server.queue(http_error(404, {"message": "Content not found"}))
        code, output = run(capsys, "content", "get", "questions", "missing")
        assert code == 1
        assert output == {
            "error": "Content not found",
            "details": {"message": "Content not found"},
            "kind": "not_found",
            "status": 404,
            "retryable": False,
        }

    def test_create(self, capsys, server):
        server.queue(content_item("new"))
        code, output = run(capsys, "content", "create", "questions", "--data", '{"title": {"iv": "T"}}', "--publish")
        assert code == 0
        assert output["id"] == "new"
        assert server.last.full_url.endswith("?publish=true")

    def test_create_from_stdin(self, capsys, server, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO('{"title": {"iv": "T"}}'))
        server.queue(content_item("new"))
        code, _ = run(capsys, "content", "create", "questions", "--data", "-")
        assert code == 0
        assert json.loads(server.last.data) == {"title": {"iv": "T"}}

    def test_create_invalid_json(self, capsys, server):
        code, output = run(capsys, "content", "create", "questions", "--data", "{nope")
        assert code == 1
        assert output["error"].startswith("Invalid JSON in --data")
        assert server.requests == []

    def test_update_patch(self, capsys, server):
        server.queue(content_item("a"))
        code, _ = run(capsys, "content", "update", "questions", "a", "--data", "{}", "--patch", "--expected-version", "2")
        assert code == 0
        assert server.last.get_method() == "PATCH"
        assert server.last.get_header("If-match") == "2"

    def test_delete(self, capsys, server):
        server.queue(None)
        code, output = run(capsys, "content", "delete", "questions", "a", "--permanent")
        assert code == 0
        assert output["success"] is True
        assert server.last.full_url.endswith("/questions/a?permanent=true")

    def test_publish(self, capsys, server):
        server.queue({**content_item("a"), "status": "Published"})
        code, output = run(capsys, "content", "publish", "questions", "a")
        assert code == 0
        assert output["status"] == "Published"
        assert server.last.full_url.endswith("/questions/a/publish")

    def test_publish_empty_body(self, capsys, server):
        server.queue(None)
        code, output = run(capsys, "content", "publish", "questions", "a")
        assert code == 0
        assert output["id"] == "a"
        assert output["status"] is None

    def test_missing_base_url(self, capsys, monkeypatch):
        monkeypatch.delenv("SQUIDEX_API_BASE_URL")
        code, output = run(capsys, "content", "get", "questions", "a")
        assert code == 1
        assert "SQUIDEX_API_BASE_URL" in output["error"]

    def test_base_url_flag(self, capsys, server, monkeypatch):
        monkeypatch.delenv("SQUIDEX_API_BASE_URL")
        server.queue(content_item("a"))
        run(capsys, "--base-url", "http://other.test", "content", "get", "questions", "a")
        assert server.last.full_url == "http://other.test/squidex/content/questions/a"
