"""Unit tests for the repo-creator command line."""

from __future__ import annotations

import json

import pytest

from repo_creator import cli
from repo_creator.catalog import RepositoryDescriptor
from repo_creator.sources import SourceError
from tests.helpers.fakes import FakeLedger, FakeSearch, FakeTemplateCatalogue, repos


def _parse(*argv: str) -> object:
    return cli.build_parser().parse_args(list(argv))


def test_parser_reads_repository_slug() -> None:
    """Repository arguments are parsed into descriptors."""
    args = _parse("favorite", "acme/starter")

    assert args.repository == RepositoryDescriptor("acme", "starter")


def test_parser_rejects_bad_slug() -> None:
    """Slugs without an owner are rejected by argparse."""
    with pytest.raises(SystemExit):
        _parse("favorite", "starter")


@pytest.mark.asyncio
async def test_choose_with_search_prints_snapshot() -> None:
    """choose prints the catalog including search results."""
    templates = FakeTemplateCatalogue(popular=repos("b/y"))
    search = FakeSearch({("acme", None): repos("acme/starter", "b/y")})

    code, output = await cli.run_command(
        _parse("choose", "--owner", "acme"),
        templates,
        search,
        FakeLedger(),
        logged_in=False,
    )

    payload = json.loads(output)
    assert code == 0
    assert payload["search_results"] == [
        {"owner": "acme", "name": "starter"},
        {"owner": "b", "name": "y"},
    ]
    assert payload["popular"] == [{"owner": "b", "name": "y"}]


@pytest.mark.asyncio
async def test_favorite_command_toggles() -> None:
    """favorite adds the repository to the server's favorites."""
    templates = FakeTemplateCatalogue()

    code, output = await cli.run_command(
        _parse("favorite", "acme/starter"),
        templates,
        FakeSearch(),
        FakeLedger(),
        logged_in=True,
    )

    assert code == 0
    assert templates.favorites == repos("acme/starter")
    assert json.loads(output)["favorites"] == [{"owner": "acme", "name": "starter"}]


@pytest.mark.asyncio
async def test_failures_set_exit_code() -> None:
    """Any published failure turns into exit code 1."""
    templates = FakeTemplateCatalogue()
    templates.fail("get_popular", SourceError.http_error("popular", 500))

    code, _ = await cli.run_command(
        _parse("choose"), templates, FakeSearch(), FakeLedger(), logged_in=False
    )

    assert code == 1


@pytest.mark.asyncio
async def test_sponsorships_command_lists_repositories() -> None:
    """sponsorships prints the user's sponsored repositories."""
    ledger = FakeLedger(repos("acme/starter"))

    code, output = await cli.run_command(
        _parse("sponsorships"),
        FakeTemplateCatalogue(),
        FakeSearch(),
        ledger,
        logged_in=True,
    )

    assert code == 0
    assert json.loads(output) == [{"owner": "acme", "name": "starter"}]


def test_main_reports_missing_configuration(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A missing API URL exits with code 2 before any request."""
    monkeypatch.delenv("REPO_CREATOR_API_URL", raising=False)
    monkeypatch.setattr(cli, "configure_logging", lambda level: ("INFO", False))

    assert cli.main(["choose"]) == 2
    assert "REPO_CREATOR_API_URL is required" in capsys.readouterr().err
