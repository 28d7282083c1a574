import logging
import sys

_PREFIX = "[INVENTORY]"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stdout handler to the "inventory" logger tree.
    Safe to call more than once; later calls only adjust the level.
    """
    root = logging.getLogger("inventory")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(
            logging.Formatter(f"{_PREFIX} %(levelname)s %(name)s: %(message)s")
        )
        root.addHandler(h)
    return root
