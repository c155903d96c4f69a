"""MetaPkg - meta package manager for PyPI, Composer and GitHub-hosted OSS.

    Returns:
        int: Exit code (0 for handled commands and explicit help, 1 for usage errors)
"""
import logging
import sys

from args import USAGE, parse_args
from config import load_config
from constants import ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
import commands
from render import CommandResult, render, save_output

logger = logging.getLogger(__name__)


def dispatch(args, config):
    """Run the handler selected by ``args.action`` and return its result."""
    action = args.action
    if action == "info":
        return commands.cmd_info(config, args.ecosystem, args.name)
    if action == "deps":
        return commands.cmd_deps(config, args.ecosystem, args.name, args.version)
    if action == "install":
        return commands.cmd_install(config, args.ecosystem, args.name, args.version)
    if action == "search":
        return commands.cmd_search(config, args.query)
    if action == "issue":
        return commands.cmd_issue(config, args.repo, args.title, args.body)
    if action == "issues-list":
        return commands.cmd_issues_list(config, args.repo, state=args.STATE, limit=args.LIMIT)
    if action == "issues-show":
        return commands.cmd_issues_show(config, args.repo, args.number)
    if action == "issues-comment":
        return commands.cmd_issues_comment(config, args.repo, args.number, args.body)
    if action == "discuss-list":
        return commands.cmd_discuss_list(config, args.repo, limit=args.LIMIT)
    if action == "discuss-show":
        return commands.cmd_discuss_show(config, args.repo, args.number)
    if action == "discuss-comment":
        return commands.cmd_discuss_comment(config, args.repo, args.number, args.body)
    if action == "discuss-new":
        return commands.cmd_discuss_new(config, args.repo, args.category, args.title, args.body)
    if action == "crawl" and args.crawl_target == "trending":
        return commands.cmd_crawl_trending(config, args.output)
    if action == "crawl" and args.crawl_target == "tag":
        return commands.cmd_crawl_tag(config, args.topic, args.output, args.max_results)
    return CommandResult.failure(str(action), f"Unknown command '{action}'")


def emit(result, as_json=False, log_output=None):
    """Write a result to stdout (errors go to the log on stderr)."""
    if not result.ok:
        logger.error("%s", result.error)
    text = render(result, as_json=as_json)
    if text:
        sys.stdout.write(text + "\n")
    if log_output:
        try:
            save_output(log_output, text)
        except OSError as e:
            logger.error("Output copy couldn't be written to %s: %s", log_output, e)


def serve(args, config):
    from web.server import run_server  # pylint: disable=import-outside-toplevel
    run_server(config, host=args.WEB_HOST, port=args.WEB_PORT)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    if args.action in (None, "help"):
        sys.stdout.write(USAGE)
        sys.exit(ExitCodes.SUCCESS.value)

    config = load_config(args)
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action=args.action,
                home=config.home,
                authenticated=config.has_token,
            ),
        )

    if args.action == "serve":
        serve(args, config)
        sys.exit(ExitCodes.SUCCESS.value)

    result = dispatch(args, config)
    emit(result, as_json=args.JSON, log_output=args.LOG_OUTPUT)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
