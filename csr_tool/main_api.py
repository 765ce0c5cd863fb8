import argparse
import configparser
import logging
import pathlib
import sys
from typing import List

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from starlette import status

from csr_tool import utils
from csr_tool.CsrTool import generate_key_and_csr
from csr_tool.errors import CsrToolError
from csr_tool.pydantic_schemas import CsrRequestModel, KeyAndCsrModel, SubjectConfig

__app__ = "csr_tool_api"
__version__ = "0.1.0"
default_ini_file: pathlib.Path = pathlib.Path().cwd() / r"settings" / "csr_tool_api.ini"

log = logging.getLogger(__name__)

app = FastAPI()


def depends_subject() -> SubjectConfig:
    return SubjectConfig()


def get_ini(setting: str, ini_file: pathlib.Path = default_ini_file) -> str | None:
    """
    load the ini file setting from the ini file default section
    returns None if the file or the setting requested is not found
    """
    if ini_file.exists() is False:
        log.info(f"Ini settings file not found: {ini_file}")
        return None
    try:
        config = configparser.ConfigParser()
        config.read(ini_file)
    except configparser.Error as e:
        log.critical(f"ini file problem: {e} - {ini_file}")
        sys.exit(-1)

    if config.has_option("default", setting):
        value = config["default"][setting]
        log.info(f"Ini settings file used: {ini_file} - {setting} - section: default - value: {value} ")
        return value
    else:
        log.error(f"Setting file does not contain the setting requested: {setting}")
        return None


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse the programme arguments
    :return: arguments
    """
    parser = argparse.ArgumentParser(description="private key and csr api", prog=__app__)

    parser.add_argument(
        "-pp",
        "--port",
        dest="port",
        default=8000,
        type=int,
        help="port to run this web app on, defaults to port 8000",
    )

    parser.add_argument(
        "-ho",
        "--host",
        dest="host",
        default="127.0.0.1",
        type=str,
        help="address to listen on, defaults to 127.0.0.1",
    )

    parser.add_argument(
        "-ll",
        "--log-level",
        choices=["debug", "info", "warning"],
        default="info",
        type=str,
        help="log detail, debug all, info less (default is info)",
    )

    parser.add_argument(
        "-v",
        "--version",
        help="get version information then exit",
        action="store_true",  # no extra value after the parameter
    )

    return parser.parse_args(argv)


@app.get("/health")
def health():
    return "Healthy: OK"


@app.get("/config", response_model=SubjectConfig)
def config(subject: SubjectConfig = Depends(depends_subject)):
    """
    The fixed subject fields every csr from this api is made with,
    the common name comes from each request
    """
    return subject


@app.post("/csr", response_model=KeyAndCsrModel)
def post_csr(request: CsrRequestModel, subject: SubjectConfig = Depends(depends_subject)):
    """
    Make a new private key and a csr for the identity in the request
    both are returned in pem format, the private key is not kept or encrypted
    """
    try:
        return generate_key_and_csr(
            key_size=request.key_size, identity=request.identity, subject=subject
        )
    except CsrToolError as e:
        log.error(f"error creating the csr: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def server(host: str = "127.0.0.1", port: int = 8000, log_level: str = "info"):
    log.info(f"Running server: {host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
    )


def main(argv: List[str] | None = None):
    args = parse_args(argv)
    utils.set_up_logging(args.log_level)

    if args.version:
        log.info(f"Application: {__app__} - Version: {__version__}")
        sys.exit(0)

    port = get_ini("port")
    if port is None:
        port = args.port
    else:
        log.debug(f"convert {port} to int its is {type(port)}")
        port = int(port)

    host = get_ini("host")
    if host is None:
        host = args.host

    server(host=host, port=port, log_level=args.log_level)


if __name__ == "__main__":
    main()
