import logging

from rich.logging import RichHandler

__version__ = "0.1.0"


def setup_logging(level: int = logging.INFO) -> None:
    """Install the rich console handler on the root logger."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                show_path=level <= logging.DEBUG,
            )
        ],
    )
