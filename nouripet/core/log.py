"""
Logging setup shared by the API and the seed script.

One line per record:
<RunId>|<Date>|<Time>|<Level>|<File:Line>|<Module.Func>|<Message>
"""

import datetime
import logging
import uuid

RUN_ID: str = uuid.uuid4().hex[:8]


class PipeFormatter(logging.Formatter):
    """Pipe-delimited single-line formatter."""

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.datetime.fromtimestamp(record.created)
        line = (
            f"{RUN_ID}|{dt:%Y-%m-%d}|{dt:%H:%M:%S}|{record.levelname}|"
            f"{record.filename}:{record.lineno}|{record.module}.{record.funcName}|"
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}|{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO") -> None:
    """
    Install the formatter on the root logger.

    Safe to call more than once; handlers are only added the first time.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(isinstance(h.formatter, PipeFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(PipeFormatter())
    root.addHandler(handler)
