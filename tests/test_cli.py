"""Tests for promptshelf.cli via Click's CliRunner."""

import json

import pytest
from click.testing import CliRunner

from promptshelf.cli import cli
from promptshelf.storage import PromptStore


@pytest.fixture
def home(tmp_path):
    return tmp_path / "shelf"


def _invoke(home, *args):
    runner = CliRunner()
    return runner.invoke(cli, ["--home", str(home), *args])


def _store(home):
    return PromptStore(path=home / "prompt.json")


class TestList:
    def test_empty(self, home):
        result = _invoke(home, "list")
        assert result.exit_code == 0
        assert "No prompts yet" in result.output

    def test_table(self, home):
        _store(home).add_prompt({"id": "p1", "name": "First", "content": "hello"})
        result = _invoke(home, "list")
        assert result.exit_code == 0
        assert "p1" in result.output
        assert "First" in result.output

    def test_json(self, home):
        _store(home).add_prompt({"id": "a", "createdAt": 1})
        _store(home).add_prompt({"id": "b", "createdAt": 2})
        result = _invoke(home, "list", "--json")
        assert result.exit_code == 0
        assert [p["id"] for p in json.loads(result.output)] == ["b", "a"]


class TestAddShowDelete:
    def test_add(self, home):
        result = _invoke(home, "add", "p1", "--content", "hi", "--name", "Hi")
        assert result.exit_code == 0
        prompt = _store(home).get_prompt("p1")
        assert prompt["content"] == "hi"
        assert prompt["name"] == "Hi"

    def test_add_duplicate(self, home):
        _invoke(home, "add", "p1", "-c", "one")
        result = _invoke(home, "add", "p1", "-c", "two")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_show(self, home):
        _store(home).add_prompt({"id": "p1", "content": "body text", "tags": ["t"]})
        result = _invoke(home, "show", "p1")
        assert result.exit_code == 0
        assert "body text" in result.output
        assert "tags" in result.output

    def test_show_missing(self, home):
        result = _invoke(home, "show", "ghost")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete(self, home):
        _store(home).add_prompt({"id": "p1"})
        result = _invoke(home, "delete", "p1")
        assert result.exit_code == 0
        assert _store(home).get_prompt("p1") is None

    def test_delete_missing(self, home):
        result = _invoke(home, "delete", "ghost")
        assert result.exit_code == 1


class TestUpdate:
    def test_set_and_unset(self, home):
        _store(home).add_prompt({"id": "p1", "title": "old", "note": "n"})
        result = _invoke(
            home, "update", "p1", "--set", "title=new", "--set", "rank=3", "--unset", "note"
        )
        assert result.exit_code == 0
        prompt = _store(home).get_prompt("p1")
        assert prompt["title"] == "new"
        assert prompt["rank"] == 3
        assert "note" not in prompt

    def test_nothing_to_update(self, home):
        _store(home).add_prompt({"id": "p1"})
        result = _invoke(home, "update", "p1")
        assert result.exit_code != 0

    def test_bad_assignment(self, home):
        _store(home).add_prompt({"id": "p1"})
        result = _invoke(home, "update", "p1", "--set", "novalue")
        assert result.exit_code != 0

    def test_unknown_id(self, home):
        result = _invoke(home, "update", "ghost", "--set", "a=1")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestSend:
    def test_add_message(self, home):
        result = _invoke(home, "send", 'add_prompt:{"id":"p1","content":"hi"}')
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("window.promptOperationResult(")
        assert '\\"success\\":true' in lines[0]
        assert lines[1].startswith("window.updatePrompts(")
        assert _store(home).get_prompt("p1") is not None

    def test_delete_unknown(self, home):
        result = _invoke(home, "send", 'delete_prompt:{"id":"p2"}')
        assert result.exit_code == 0
        assert "Prompt not found" in result.output
        assert "updatePrompts" not in result.output

    def test_unhandled(self, home):
        result = _invoke(home, "send", "get_settings:")
        assert result.exit_code == 1


def test_verbose_writes_log(home):
    result = _invoke(home, "--verbose", "add", "p1", "-c", "x")
    assert result.exit_code == 0
    log = (home / "logs" / "promptshelf.log").read_text()
    assert "Added prompt: p1" in log
