"""Argument parsing functionality for MetaPkg."""

import argparse
import sys

from constants import Constants, ExitCodes

HELP_COMMANDS = ("help", "-h", "--help", "/?")

USAGE = """\
MetaPkg - meta package manager (PyPI + Composer + OSS via GitHub)

CLI USAGE:
  metapkg help

  metapkg info <ecosystem> <name>
  metapkg deps <ecosystem> <name> [version]
  metapkg install <ecosystem> <name> [version]

  metapkg search oss "<query>"
  metapkg issue  oss <owner/repo> "<title>" "<body>"

  metapkg issues-list    oss <owner/repo> [--state open|closed|all] [--limit N]
  metapkg issues-show    oss <owner/repo> <number>
  metapkg issues-comment oss <owner/repo> <number> "<body>"

  metapkg discuss-list    oss <owner/repo> [--limit N]
  metapkg discuss-show    oss <owner/repo> <number>
  metapkg discuss-comment oss <owner/repo> <number> "<body>"
  metapkg discuss-new     oss <owner/repo> "<category>" "<title>" "<body>"

  metapkg crawl trending <output.json>
  metapkg crawl tag <topic> <output.json> [maxResults]

  metapkg serve [--host HOST] [--port PORT]

GLOBAL OPTIONS (before the command):
  --loglevel LEVEL   DEBUG, INFO, WARNING, ERROR, CRITICAL
  --logfile PATH     also append log records to PATH
  --config PATH      YAML configuration file
  --home PATH        directory holding the .metapkg artifact cache
  --json             render results as JSON
  --log-output PATH  save a copy of the rendered result

ECOSYSTEMS:
  pypi       Python packages from https://pypi.org
  composer   PHP packages from https://repo.packagist.org
  oss        Generic OSS via GitHub repositories (owner/repo)

ENVIRONMENT:
  GITHUB_TOKEN       enables issue/discussion writes, raises rate limits
"""


class MetaPkgArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that prints the full usage text and exits 1 on errors."""

    def error(self, message):
        sys.stderr.write(f"{self.prog}: error: {message}\n\n")
        sys.stderr.write(USAGE)
        sys.exit(ExitCodes.USAGE_ERROR.value)


def _positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {text!r}")
    return value


def _oss_only(sub):
    sub.add_argument("ecosystem", choices=["oss"], type=str.lower,
                     help="Only 'oss' (GitHub) supports this command")


def _add_repo_number(sub):
    _oss_only(sub)
    sub.add_argument("repo", help="owner/repo")
    sub.add_argument("number", type=_positive_int, help="Issue or discussion number")


def build_parser():
    """Build the argument parser with one subcommand per action."""
    parser = MetaPkgArgumentParser(
        prog="metapkg",
        description="MetaPkg - query PyPI, Packagist and GitHub through one model",
        add_help=False,
    )

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--home",
                        dest="HOME",
                        help="Directory holding the .metapkg artifact cache",
                        action="store",
                        type=str)
    parser.add_argument("--json",
                        dest="JSON",
                        help="Render results as JSON",
                        action="store_true")
    parser.add_argument("--log-output",
                        dest="LOG_OUTPUT",
                        help="Save a copy of the rendered result to this file",
                        action="store",
                        type=str)

    subparsers = parser.add_subparsers(dest="action", parser_class=MetaPkgArgumentParser)

    subparsers.add_parser("help", help="Show usage")

    sub = subparsers.add_parser("info", help="Show package summary and versions")
    sub.add_argument("ecosystem", help="pypi, composer or oss")
    sub.add_argument("name", help="Package name")

    for name, helptext in (("deps", "List dependencies of a version"),
                           ("install", "Download and cache a version's artifact")):
        sub = subparsers.add_parser(name, help=helptext)
        sub.add_argument("ecosystem", help="pypi, composer or oss")
        sub.add_argument("name", help="Package name")
        sub.add_argument("version", nargs="?", default=None, help="Version (default: latest)")

    sub = subparsers.add_parser("search", help="Search GitHub repositories")
    _oss_only(sub)
    sub.add_argument("query", help="Free-text query")

    sub = subparsers.add_parser("issue", help="Create a GitHub issue")
    _oss_only(sub)
    sub.add_argument("repo", help="owner/repo")
    sub.add_argument("title")
    sub.add_argument("body")

    sub = subparsers.add_parser("issues-list", help="List GitHub issues")
    _oss_only(sub)
    sub.add_argument("repo", help="owner/repo")
    sub.add_argument("--state", dest="STATE", choices=Constants.ISSUE_STATES, default="open")
    sub.add_argument("--limit", dest="LIMIT", type=_positive_int, default=Constants.ISSUE_LIST_DEFAULT)

    sub = subparsers.add_parser("issues-show", help="Show an issue and its comments")
    _add_repo_number(sub)

    sub = subparsers.add_parser("issues-comment", help="Comment on an issue")
    _add_repo_number(sub)
    sub.add_argument("body")

    sub = subparsers.add_parser("discuss-list", help="List GitHub discussions")
    _oss_only(sub)
    sub.add_argument("repo", help="owner/repo")
    sub.add_argument("--limit", dest="LIMIT", type=_positive_int, default=Constants.ISSUE_LIST_DEFAULT)

    sub = subparsers.add_parser("discuss-show", help="Show a discussion and its comments")
    _add_repo_number(sub)

    sub = subparsers.add_parser("discuss-comment", help="Comment on a discussion")
    _add_repo_number(sub)
    sub.add_argument("body")

    sub = subparsers.add_parser("discuss-new", help="Create a discussion")
    _oss_only(sub)
    sub.add_argument("repo", help="owner/repo")
    sub.add_argument("category", help="Category name (case-insensitive)")
    sub.add_argument("title")
    sub.add_argument("body")

    crawl = subparsers.add_parser("crawl", help="Crawl GitHub into a JSON report")
    crawl_sub = crawl.add_subparsers(dest="crawl_target", parser_class=MetaPkgArgumentParser)
    crawl_sub.required = True
    trending = crawl_sub.add_parser("trending", help="Scrape the trending page")
    trending.add_argument("output", help="Output JSON file")
    tag = crawl_sub.add_parser("tag", help="Search repositories by topic")
    tag.add_argument("topic")
    tag.add_argument("output", help="Output JSON file")
    tag.add_argument("max_results", nargs="?", type=int, default=Constants.CRAWL_TOPIC_DEFAULT)

    serve = subparsers.add_parser("serve", help="Run the web form")
    serve.add_argument("--host", dest="WEB_HOST", default=Constants.WEB_HOST)
    serve.add_argument("--port", dest="WEB_PORT", type=int, default=Constants.WEB_PORT)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Any of the HELP_COMMANDS in command position maps to ``action="help"``.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] in HELP_COMMANDS:
        argv = ["help"]
    return build_parser().parse_args(argv)
