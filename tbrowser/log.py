import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level="WARNING", log_file=None, format_string=None, force=False):
    """
    Configure the ``tbrowser`` logger.

    Console output goes to stderr so it never interleaves with the page
    text printed on stdout. Handlers are only installed once unless
    ``force`` is set.
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger("tbrowser")
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        logger.handlers.clear()

        console = logging.StreamHandler(sys.stderr)
        console.setLevel(numeric_level)
        console.setFormatter(logging.Formatter(format_string))
        logger.addHandler(console)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(format_string))
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger
