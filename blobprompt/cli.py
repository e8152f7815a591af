"""
Command line interface for blobprompt.

    blobprompt <node_url> <namespace_hex> <prompt>

Requires OPENAI_KEY in the environment.
"""
import argparse
import logging
import sys
from typing import List, Mapping, NoReturn, Optional

from .client import BlobClient
from .completion import CompletionClient
from .config import DEFAULT_LOG_LEVEL, Settings
from .exceptions import ArgumentError, BlobPromptError
from .pipeline import PromptPipeline
from .version import __version__

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
EXIT_INTERRUPTED = 130


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad input"""

    def error(self, message: str) -> NoReturn:
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    """
    Parser for the three positional arguments.

    Options are not declared so that a prompt such as ``-h`` is taken as
    text; ``--help`` and ``--version`` are only honored alone (see main).
    """
    parser = _ArgumentParser(
        prog="blobprompt",
        description="Submit a prompt as a blob, fetch it back, and send it to a chat model.",
        add_help=False,
    )
    parser.add_argument("node_url", help="Node RPC endpoint, e.g. http://localhost:26658")
    parser.add_argument("namespace", help="Namespace ID as hex, up to 10 bytes")
    parser.add_argument("prompt", help="Prompt text to submit")
    return parser


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("blobprompt").setLevel(level)


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run the CLI and return the process exit code.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        environ: Environment to read settings from (defaults to os.environ)
    """
    argv = sys.argv[1:] if argv is None else list(argv)

    parser = build_parser()
    if argv in (["-h"], ["--help"]):
        parser.print_help()
        return 0
    if argv == ["--version"]:
        print(f"{parser.prog} {__version__}")
        return 0

    try:
        # "--" ends option parsing, so a prompt like "-x" stays positional
        args = parser.parse_args(["--", *argv])
    except ArgumentError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return e.exit_code

    configure_logging()

    step = "load configuration"
    pipeline = None
    try:
        settings = Settings.from_env(environ)
        configure_logging(settings.log_level)
        completion_client = CompletionClient(settings)

        step = "create client"
        auth_token = settings.node_auth_token.get_secret_value() if settings.node_auth_token else None
        with BlobClient(
            args.node_url,
            auth_token=auth_token,
            timeout=settings.timeout,
            retry_count=settings.retry_count,
            gas_price=settings.gas_price,
            explorer_url=settings.explorer_url,
        ) as blob_client:
            pipeline = PromptPipeline(blob_client, completion_client)
            result = pipeline.run(args.namespace, args.prompt)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return EXIT_INTERRUPTED
    except BlobPromptError as e:
        if pipeline is not None and pipeline.failed_step:
            step = pipeline.failed_step
        logger.error(f"Step '{step}' failed: {e}")
        return e.exit_code

    print(result.response)
    return 0


def run() -> NoReturn:
    sys.exit(main())


if __name__ == "__main__":
    run()
