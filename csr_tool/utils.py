import logging
import sys
import time

log_format = "[%(asctime)s.%(msecs)03d] %(levelname)-8s %(name)-12s %(lineno)d %(funcName)s - %(message)s"
log_date_format = "%Y-%m-%d:%H:%M:%S"

log_levels = {
    "debug": logging.DEBUG,  # shows all
    "info": logging.INFO,  # shows info and below
    "warning": logging.WARNING,
}


def set_up_logging(log_level: str | None = "info") -> None:
    """
    Configure the root logger, stdout is kept for the pem output so log to stderr
    an unknown or missing level falls back to info
    """
    logging.basicConfig(
        level=log_levels.get(log_level or "info", logging.INFO),
        datefmt=log_date_format,
        format=log_format,
        # Force this log handler to take over the others that may have been declared in other modules
        # see: https://github.com/python/cpython/blob/3.8/Lib/logging/__init__.py#L1912
        force=True,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


# https://stackoverflow.com/questions/739654/how-to-make-function-decorators-and-chain-them-together?rq=1
def benchmark(func):
    """
    A decorator that logs the time a function takes
    to execute.
    """

    def wrapper(*args, **kwargs):
        t = time.perf_counter()
        res = func(*args, **kwargs)
        logging.getLogger(func.__module__).debug(
            "====== {0} {1:.3f}s".format(func.__name__, time.perf_counter() - t)
        )
        return res

    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper
