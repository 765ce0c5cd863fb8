import argparse
import logging
import sys
from typing import List

from csr_tool import utils
from csr_tool.CsrTool import generate_key_and_csr
from csr_tool.errors import CsrToolError
from csr_tool.pydantic_schemas import DEFAULT_IDENTITY, DEFAULT_KEY_SIZE

__app__ = "csr_tool"
__version__ = "0.1.0"

log = logging.getLogger(__name__)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse the programme arguments, with none given a 4096 bit key and a csr for localhost are made
    :return: arguments
    """
    parser = argparse.ArgumentParser(
        description="private key and certificate signing request tool", prog=__app__
    )

    parser.add_argument(
        "-k",
        "--key-size",
        dest="key_size",
        default=DEFAULT_KEY_SIZE,
        type=int,
        help=f"RSA key size in bits (default is {DEFAULT_KEY_SIZE})",
    )

    parser.add_argument(
        "-i",
        "--identity",
        dest="identity",
        default=DEFAULT_IDENTITY,
        type=str,
        help=f"common name of the csr (default is {DEFAULT_IDENTITY})",
    )

    parser.add_argument(
        "-ll",
        "--log-level",
        choices=["debug", "info", "warning"],
        default="info",
        type=str,
        help="log detail on stderr, debug all, info less (default is info)",
    )

    parser.add_argument(
        "-v",
        "--version",
        help="get version information then exit",
        action="store_true",  # no extra value after the parameter
    )

    return parser.parse_args(argv)


def main(argv: List[str] | None = None):
    args = parse_args(argv)
    utils.set_up_logging(args.log_level)
    log.debug(str(args))

    if args.version:
        log.info(f"Application: {__app__} - Version: {__version__}")
        sys.exit(0)

    try:
        result = generate_key_and_csr(key_size=args.key_size, identity=args.identity)
    except CsrToolError as e:
        log.critical(f"Unable to create the private key and csr: {e}")
        sys.exit(-1)

    print(f"Key:\n{result.private_key}")
    print(f"CSR:\n{result.csr}")


if __name__ == "__main__":
    main()
