"""
Session state for MCP Jira Server.

- Holds named values for the lifetime of one process invocation.
- Carries the interactive (CLI) mode flag and the CLI text summary.
- Stashes normalized operation results under fixed keys.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from .constants import OperationDefaults, StateKeys

logger = logging.getLogger(__name__)

_MISSING = object()


class SessionState:
    """
    Process-lifetime key/value store shared by chained operation calls.

    Temporary values shadow persistent ones until ``clear_temporary`` runs
    (``request_scope`` does that on exit).
    """

    def __init__(self, cli_mode: bool = False):
        self._values: Dict[str, Any] = {}
        self._temporary: Dict[str, Any] = {}
        if cli_mode:
            self._values[StateKeys.MODE] = OperationDefaults.CLI_MODE

    def get(self, name: str, default: Any = None) -> Any:
        if name in self._temporary:
            return self._temporary[name]
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def set_temporary(self, name: str, value: Any) -> None:
        self._temporary[name] = value

    def delete(self, name: str) -> None:
        self._values.pop(name, None)
        self._temporary.pop(name, None)

    def clear_temporary(self) -> None:
        self._temporary.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._temporary or name in self._values

    @contextmanager
    def request_scope(self) -> Iterator["SessionState"]:
        """Clear request-scoped values when the block exits."""
        try:
            yield self
        finally:
            self.clear_temporary()

    @property
    def is_cli(self) -> bool:
        return self.get(StateKeys.MODE) == OperationDefaults.CLI_MODE

    @property
    def cli_output(self) -> Optional[str]:
        return self.get(StateKeys.CLI_OUTPUT)

    def set_cli_output(self, text: str) -> None:
        """Store *text* as the CLI summary; ignored outside CLI mode."""
        if self.is_cli:
            self.set(StateKeys.CLI_OUTPUT, text)

    @contextmanager
    def suppress_cli_output(self) -> Iterator["SessionState"]:
        """
        Turn CLI mode off for the duration of the block.

        The saved mode is restored on every exit path, including exceptions,
        so wrapped operations never leak suppressed output into later calls.
        """
        saved = self._values.pop(StateKeys.MODE, _MISSING)
        logger.debug("CLI output suppressed")
        try:
            yield self
        finally:
            if saved is _MISSING:
                self._values.pop(StateKeys.MODE, None)
            else:
                self._values[StateKeys.MODE] = saved
            logger.debug("CLI output restored")
