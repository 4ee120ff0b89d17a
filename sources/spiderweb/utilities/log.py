import datetime
import sys
from loguru import logger as COLORLOG

from ..config import Config

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"

COLORLOG.configure(
    handlers=[
        {"sink": sys.stdout, "level": Config.LOG_LEVEL, "format": "<level>{message}</level>"},
    ]
)


# LOG#############
class Log:
    """Thin tagged wrapper around loguru.

    Records are written synchronously on the calling thread.
    """

    INFO = 0
    WARN = 1
    ERRO = 2

    def __init__(self, sink=None) -> None:
        self.m_Sink = sink or COLORLOG

    def _emit(self, data: str, tag: int) -> None:
        time = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        if tag == self.INFO:
            self.m_Sink.info(f"{GREEN}[{time}][INFO] {data}{RESET}")
        elif tag == self.WARN:
            self.m_Sink.warning(f"{YELLOW}[{time}][warn] {data}{RESET}")
        else:
            self.m_Sink.error(f"{RED}[{time}][ERRO] {data}{RESET}")

    def info(self, msg: str) -> None:
        self._emit(msg, self.INFO)

    def warn(self, msg: str) -> None:
        self._emit(msg, self.WARN)

    def erro(self, msg: str) -> None:
        self._emit(msg, self.ERRO)

    def sync(self) -> None:
        COLORLOG.complete()


########LOG########
CORELOG = Log()
########LOG########
