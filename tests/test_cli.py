"""
Tests for the command line interface
"""

from unittest.mock import patch

import pytest
from rich.console import Console

from linkshelf import cli
from linkshelf.classification_service import CategoryClassifier
from linkshelf.config import Config
from linkshelf.link_service import LinkService
from linkshelf.link_store import SqliteLinkStore

from .fixtures import MockLLMProvider, MockPageFetcher


def fake_build_service(args) -> LinkService:
    """Same wiring as the real CLI, with network access replaced by fakes"""
    return LinkService(
        store=SqliteLinkStore(args.db),
        classifier=CategoryClassifier(llm_provider=MockLLMProvider("백엔드 개발")),
        fetcher=MockPageFetcher(),
    )


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Run the CLI against a temporary database"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "console", Console(width=200))
    Config.reset_instance()
    db = str(tmp_path / "links.db")

    def _run(*argv):
        with patch("linkshelf.cli.build_service", side_effect=fake_build_service), \
                patch("linkshelf.cli.setup_logging"):
            return cli.main(["--db", db, *argv])

    yield _run
    Config.reset_instance()


class TestCli:
    """Test CLI commands end to end"""

    def test_no_command(self, capsys):
        assert cli.main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_add_and_count(self, run, capsys):
        assert run("add", "https://example.com/a", "example.com/b") == 0
        assert run("count") == 0

        out = capsys.readouterr().out
        assert "Saved" in out
        assert "Total: 2 links" in out

    def test_add_duplicate_fails(self, run, capsys):
        run("add", "https://example.com/a")

        assert run("add", "https://www.example.com/a") == 1
        assert "이미 등록된 링크입니다." in capsys.readouterr().out

    def test_add_invalid_url(self, run, capsys):
        assert run("add", "not a url") == 1
        assert "Failed" in capsys.readouterr().out

    def test_list(self, run, capsys):
        run("add", "https://example.com/a")
        capsys.readouterr()

        assert run("list") == 0
        assert "example.com/a" in capsys.readouterr().out

    def test_list_empty(self, run, capsys):
        assert run("list") == 0
        assert "No links found." in capsys.readouterr().out

    def test_list_invalid_category(self, run, capsys):
        assert run("list", "--category", "Rust") == 1
        assert "Rust" in capsys.readouterr().out

    def test_show_and_opened(self, run, capsys):
        run("add", "https://example.com/a")
        capsys.readouterr()

        assert run("show", "1") == 0
        assert "Understanding Python Generators" in capsys.readouterr().out

        assert run("opened") == 0
        assert "example.com/a" in capsys.readouterr().out

    def test_show_missing(self, run, capsys):
        assert run("show", "42") == 1
        assert "링크를 찾을 수 없습니다." in capsys.readouterr().out

    def test_delete(self, run, capsys):
        run("add", "https://example.com/a")

        assert run("delete", "1") == 0
        assert run("delete", "1") == 1
        run("count")
        assert "Total: 0 links" in capsys.readouterr().out

    def test_owner_scoping(self, run, capsys):
        run("--owner", "2", "add", "https://example.com/a")
        capsys.readouterr()

        run("count")
        assert "Total: 0 links" in capsys.readouterr().out

    def test_categories(self, run, capsys):
        assert run("categories") == 0

        out = capsys.readouterr().out
        assert "기타" in out
        assert "분석 실패" in out


class TestBuildService:
    """Test building the real service from arguments"""

    def test_db_override(self, tmp_path):
        args = cli.create_parser().parse_args(
            ["--db", str(tmp_path / "x.db"), "--config", str(tmp_path / "missing.yaml"), "count"]
        )

        service = cli.build_service(args)

        assert service.store.db_path == str(tmp_path / "x.db")
        service.store.close()
