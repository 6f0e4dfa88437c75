# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for fbupload.

Library modules never print directly. The upload orchestrator reports each
completed step to a Logger, which decides what reaches stdout:

- Step: Always printed (progress through the upload state machine)
- Verbose: Only printed when verbose mode is enabled
- Debug: Only printed when debug mode is enabled (implies verbose)

Secrets never reach a logger in cleartext. Use mask_secret() if a token or
password must be referred to at all.

Example:
    Configure the global logger from the CLI:
        ```python
        from fbupload.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Pass a logger directly:
        ```python
        outcome = run(request, logger=get_logger(debug=True))
        ```

Note:
    The default global logger is silent, so programmatic use prints nothing
    unless a logger is configured.
"""

from __future__ import annotations

from typing import Protocol


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "AUTH", "UPLOAD").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "HTTP").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Logger that prints to stdout, honoring verbose and debug flags."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        self._verbose = verbose or debug
        self._debug = debug

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a stdout logger with the given verbosity.

    Args:
        verbose: If True, print verbose messages.
        debug: If True, print debug messages (implies verbose).

    Returns:
        A DefaultLogger instance.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Return the process-wide logger (silent unless configured)."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Replace the process-wide logger.

    Args:
        logger: Logger instance used by functions called without an
            explicit logger argument.
    """
    global _global_logger
    _global_logger = logger


def mask_secret(value: str | None) -> str:
    """Render a secret as a fixed mask that reveals only its length.

    Example:
        ```python
        mask_secret("hunter2")  # "[7 chars hidden]"
        ```
    """
    if not value:
        return "[empty]"
    return f"[{len(value)} chars hidden]"
