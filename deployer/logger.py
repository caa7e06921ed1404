"""
Observability sink handed to deployers by the surrounding system.
"""

import abc
import json
import logging
from dataclasses import asdict, is_dataclass
from typing import Any, List, Optional

from log import init_logger


class DeployerLogger(metaclass=abc.ABCMeta):
    """Fire-and-forget sink for deployment progress records."""

    @abc.abstractmethod
    def logt(self, tag: str, *data: Any) -> None:
        """Record a message together with structured payloads."""

    @abc.abstractmethod
    def logf(self, fmt: str, *args: Any) -> None:
        """Record a printf-style formatted message."""

    @abc.abstractmethod
    def get_records(self) -> List[str]:
        """Return the records captured so far."""

    @abc.abstractmethod
    def flush_records(self) -> None:
        """Drop all captured records."""


class NilLogger(DeployerLogger):
    """Logger that discards everything."""

    def logt(self, tag: str, *data: Any) -> None:
        pass

    def logf(self, fmt: str, *args: Any) -> None:
        pass

    def get_records(self) -> List[str]:
        return []

    def flush_records(self) -> None:
        pass


def _render(value: Any) -> str:
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(value)


class DefaultLogger(DeployerLogger):
    """
    Logger that keeps every record in memory and mirrors it to a
    stdlib logger.
    """

    def __init__(self, name: str = "deployer", logger: Optional[logging.Logger] = None):
        self._records: List[str] = []
        self._logger = logger or init_logger(name)

    def logt(self, tag: str, *data: Any) -> None:
        if data:
            record = f"{tag}: " + ", ".join(_render(d) for d in data)
        else:
            record = tag
        self._append(record)

    def logf(self, fmt: str, *args: Any) -> None:
        try:
            record = fmt % args if args else fmt
        except (TypeError, ValueError):
            record = f"{fmt} {args!r}"
        self._append(record)

    def get_records(self) -> List[str]:
        return list(self._records)

    def flush_records(self) -> None:
        self._records.clear()

    def _append(self, record: str) -> None:
        self._records.append(record)
        self._logger.info(record)
