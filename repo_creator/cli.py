"""Command-line access to the template chooser.

Each command activates a chooser session against the live services, performs
one action and prints the resulting catalog as JSON. Configuration comes from
the environment (see :mod:`repo_creator.sources.config`); the log level is
read from ``REPO_CREATOR_LOG_LEVEL`` unless ``--log-level`` is given.

Exit codes: 0 on success, 1 when any fetch or action failed, 2 on
configuration errors.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import typing as typ

import msgspec

from repo_creator.catalog import RepositoryDescriptor
from repo_creator.chooser import ChooseRepositoryView, SponsorshipView
from repo_creator.logging import configure_logging, get_logger, log_warning
from repo_creator.observability import LoggingErrorSink
from repo_creator.sources import (
    ConfigError,
    GitHubSearchClient,
    GitHubSearchConfig,
    PaymentAuthorization,
    RepoCreatorClient,
    RepoCreatorConfig,
)

if typ.TYPE_CHECKING:
    from repo_creator.sources.protocol import (
        RepositorySearch,
        SponsorshipLedger,
        TemplateCatalogue,
    )

logger = get_logger(__name__)

_EXIT_FAILED = 1
_EXIT_CONFIG = 2


class _CountingSink:
    """Forward failures to the logging sink and remember how many occurred."""

    def __init__(self) -> None:
        self.failures = 0
        self._inner = LoggingErrorSink()

    def publish(self, error: BaseException, *, context: str) -> None:
        self.failures += 1
        self._inner.publish(error, context=context)


def _repository(value: str) -> RepositoryDescriptor:
    try:
        return RepositoryDescriptor.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``repo-creator`` command."""
    parser = argparse.ArgumentParser(prog="repo-creator", description=__doc__)
    parser.add_argument("--log-level", default=None, help="Override the log level")
    commands = parser.add_subparsers(dest="command", required=True)

    choose = commands.add_parser("choose", help="Load the chooser and print it")
    choose.add_argument("--owner", default=None, help="Search by owner")
    choose.add_argument("--name", default=None, help="Search by repository name")

    favorite = commands.add_parser("favorite", help="Toggle a favorite")
    favorite.add_argument("repository", type=_repository, help="owner/name")

    sponsor = commands.add_parser("sponsor", help="Sponsor a repository")
    sponsor.add_argument("repository", type=_repository, help="owner/name")
    sponsor.add_argument("--token", required=True, help="Payment token id")
    sponsor.add_argument("--email", required=True, help="Billing email")

    commands.add_parser("sponsorships", help="List your sponsorships")
    return parser


async def run_command(
    args: argparse.Namespace,
    templates: TemplateCatalogue,
    search: RepositorySearch,
    ledger: SponsorshipLedger,
    *,
    logged_in: bool,
) -> tuple[int, bytes]:
    """Execute a parsed command and return its exit code and JSON output."""
    sink = _CountingSink()

    if args.command == "sponsorships":
        sponsorships = SponsorshipView(ledger, sink, logged_in=logged_in)
        await sponsorships.activate()
        output = msgspec.json.encode(sponsorships.repositories)
        return (_EXIT_FAILED if sink.failures else 0), output

    view = ChooseRepositoryView(templates, search, sink, logged_in=logged_in)
    await view.activate()
    if args.command == "choose" and (args.owner or args.name):
        await view.search(args.owner, args.name)
    elif args.command == "favorite":
        await view.toggle_favorite(args.repository)
    elif args.command == "sponsor":
        payment = PaymentAuthorization(token_id=args.token, email=args.email)
        await view.sponsor(args.repository, payment)
    output = msgspec.json.encode(view.catalog.snapshot())
    view.deactivate()
    return (_EXIT_FAILED if sink.failures else 0), output


async def _run_with_clients(
    args: argparse.Namespace,
    config: RepoCreatorConfig,
    search_config: GitHubSearchConfig,
) -> tuple[int, bytes]:
    templates = RepoCreatorClient(config)
    search = GitHubSearchClient(search_config)
    try:
        return await run_command(
            args, templates, search, templates, logged_in=config.signed_in
        )
    finally:
        await templates.aclose()
        await search.aclose()


def main(argv: list[str] | None = None) -> int:
    """Run the ``repo-creator`` command.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Process exit code.

    """
    args = build_parser().parse_args(argv)

    raw_level = args.log_level or os.environ.get("REPO_CREATOR_LOG_LEVEL", "INFO")
    normalized, invalid = configure_logging(raw_level)
    if invalid:
        log_warning(
            logger, "Invalid log level %r, falling back to %s", raw_level, normalized
        )

    try:
        config = RepoCreatorConfig.from_env()
        search_config = GitHubSearchConfig.from_env()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return _EXIT_CONFIG

    code, output = asyncio.run(_run_with_clients(args, config, search_config))
    print(output.decode("utf-8"))
    return code


if __name__ == "__main__":
    raise SystemExit(main())
