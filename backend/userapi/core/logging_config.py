import logging
import sys

_HANDLER_NAME = "userapi-stdout"


def setup_logging(level: str = "INFO", fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"):
    root = logging.getLogger()
    root.setLevel(logging.WARNING)  # keep third-party loggers quiet

    # create_app may run more than once per process (tests)
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    logging.getLogger("userapi").setLevel(getattr(logging, level.upper(), logging.INFO))

    return root
