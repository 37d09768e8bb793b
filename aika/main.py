"""
Main entry point for aika.
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from .config import load_config
from .constants import APP_DESCRIPTION, APP_NAME, APP_VERSION, PROVIDERS
from .errors import AikaError
from .pipeline import Pipeline, QueryOptions
from .rich_ui import ErrorConsole, OutputWriter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return number


def _add_common_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=argparse.SUPPRESS if suppress else None,
        help="Path to config file (default: $AIKA_CONFIG or ~/.config/aika/config.toml)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Log debug information to stderr"
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command line parser.

    --config and --debug are accepted before or after the command name.
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}"
    )
    _add_common_options(parser)

    # SUPPRESS keeps a value given before the command name
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, suppress=True)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    provider_help = f"Provider to use ({', '.join(PROVIDERS)})"

    list_models = subparsers.add_parser("list-models", parents=[common], help="List models offered by providers")
    list_models.add_argument(
        "-p", "--provider",
        type=str,
        help="Only list this provider's models"
    )

    query = subparsers.add_parser("query", parents=[common], help="Send input through a prompt template")
    query.add_argument(
        "-i", "--input",
        type=str,
        help="Input source: file:PATH[,PATH...], dir:PATH, cmd:COMMAND, '-' for stdin, or a named input"
    )
    query.add_argument(
        "--prompt",
        type=str,
        help="Name of a configured prompt template"
    )
    query.add_argument("-p", "--provider", type=str, help=provider_help)
    query.add_argument("-m", "--model", type=str, help="Model to use")
    query.add_argument(
        "-s", "--stream",
        action="store_true",
        help="Print the response as it arrives"
    )
    query.add_argument(
        "--wrap",
        type=_positive_int,
        metavar="WIDTH",
        help="Wrap the response to WIDTH columns"
    )
    query.add_argument(
        "--markdown",
        action="store_true",
        help="Render the response as markdown"
    )

    repl = subparsers.add_parser("repl", parents=[common], help="Start an interactive session")
    repl.add_argument("-p", "--provider", type=str, help=provider_help)
    repl.add_argument("-m", "--model", type=str, help="Model to use")

    return parser


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=debug)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def run(args: argparse.Namespace) -> None:
    """Execute the parsed command."""
    config = load_config(args.config)

    if args.command == "list-models":
        pipeline = Pipeline(config)
        asyncio.run(pipeline.list_models(args.provider))

    elif args.command == "query":
        writer = OutputWriter(markdown=args.markdown, wrap=args.wrap)
        pipeline = Pipeline(config, writer=writer)
        options = QueryOptions(
            input=args.input,
            prompt=args.prompt,
            provider=args.provider,
            model=args.model,
            stream=args.stream,
        )
        logger.debug(f"Query options: {options}")
        asyncio.run(pipeline.run_query(options))

    elif args.command == "repl":
        from .repl import Repl

        pipeline = Pipeline(config)
        Repl(pipeline, pipeline.provider(args.provider, args.model)).run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run aika and return the process exit code.

    Usage errors exit with status 2 through argparse.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)
    errors = ErrorConsole()

    try:
        run(args)
    except AikaError as e:
        logger.debug("Command failed", exc_info=True)
        errors.print_error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        errors.print_warning("Interrupted")
        return EXIT_INTERRUPTED

    return EXIT_OK


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
