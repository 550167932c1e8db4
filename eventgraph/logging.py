import inspect
import logging
from pprint import pformat
from typing import Any

from pydantic import BaseModel

from eventschema.mention import BaseMention


def describe_mention(mention: BaseMention) -> str:
    """Render a mention as a one-line summary (label, text, location, arguments).

    Mentions hold a back-reference to their document, so dumping them as JSON
    would serialize the whole document; this summary is used instead.
    """
    location = f"{mention.document.document_id}:{mention.sentence}[{mention.start}:{mention.end}]"
    summary = f"{mention.label}({mention.text!r} @ {location} by {mention.found_by})"
    arguments = getattr(mention, "arguments", {})
    if arguments:
        parts = [f"{role}=[{', '.join(repr(arg.text) for arg in args)}]" for role, args in arguments.items()]
        summary += " {" + "; ".join(parts) + "}"
    return summary


class PprintLogger:
    """A logger wrapper that adds pprint support to standard logging methods."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, msg: Any, pprint: bool = True) -> str:
        """Format a message, optionally using pprint.

        Mentions (and lists of mentions) are rendered with describe_mention().
        Other Pydantic models use model_dump_json(). Anything else goes
        through pformat, or str() when pprint=False.
        """
        if not pprint:
            return str(msg)

        if isinstance(msg, BaseMention):
            return describe_mention(msg)

        if isinstance(msg, (list, tuple)) and msg and all(isinstance(m, BaseMention) for m in msg):
            return "\n".join(describe_mention(m) for m in msg)

        if isinstance(msg, BaseModel):
            return msg.model_dump_json(indent=2)

        return pformat(msg, width=120, depth=None)

    def debug(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a debug message with optional pprint formatting."""
        formatted_msg = self._format_message(msg, pprint=pprint)
        self._logger.debug(formatted_msg, *args, stacklevel=2, **kwargs)

    def info(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an info message with optional pprint formatting."""
        formatted_msg = self._format_message(msg, pprint=pprint)
        self._logger.info(formatted_msg, *args, stacklevel=2, **kwargs)

    def warning(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a warning message with optional pprint formatting."""
        formatted_msg = self._format_message(msg, pprint=pprint)
        self._logger.warning(formatted_msg, *args, stacklevel=2, **kwargs)

    def error(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an error message with optional pprint formatting."""
        formatted_msg = self._format_message(msg, pprint=pprint)
        self._logger.error(formatted_msg, *args, stacklevel=2, **kwargs)

    def critical(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a critical message with optional pprint formatting."""
        formatted_msg = self._format_message(msg, pprint=pprint)
        self._logger.critical(formatted_msg, *args, stacklevel=2, **kwargs)

    def exception(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an exception message with optional pprint formatting."""
        formatted_msg = self._format_message(msg, pprint=pprint)
        self._logger.exception(formatted_msg, *args, stacklevel=2, **kwargs)

    def __getattr__(self, name: str) -> Any:
        """Delegate any other attributes to the underlying logger."""
        return getattr(self._logger, name)


def setup_logging(level: int = logging.INFO, name: str | None = None) -> PprintLogger:
    """Set up logging and return a PprintLogger instance.

    The logger is named after `name`, or after the calling module when omitted.
    """
    if name is None:
        frame = inspect.currentframe().f_back  # type: ignore[union-attr]
        name = frame.f_globals.get("__name__", "eventgraph")  # type: ignore[union-attr]
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter("%(asctime)s - %(pathname)s:%(lineno)d - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return PprintLogger(logger)
