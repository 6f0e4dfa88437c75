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

"""Decoding of raw transport output into (status code, body) pairs.

Every transport returns the response body followed by a write-out trailer
that carries the HTTP status code, exactly like `curl -w`. How the status
code is placed is a declared convention, not string arithmetic scattered
through callers:

trailing:
    The last three characters are the status code. Write-out directive
    `%{http_code}`. Compact, but only safe when nothing is printed after
    the code.

marker:
    The status code follows the labeled marker `HTTP_CODE:` inside a
    statistics block appended after the body. Robust against verbose
    transport output, because the marker is searched for rather than
    assumed to be at a fixed position. The last marker wins.

With either convention, a write-out statistics block at the end of the body
(`=== ... ===` header lines and `HTTP_CODE:`, `TOTAL_TIME:`, `SIZE_UPLOAD:`,
`SIZE_DOWNLOAD:`, `SPEED_UPLOAD:`, `REQUEST_HEADER:` lines) is removed, as is
a dangling `HTTP_CODE:` label directly before a trailing code.

When the transport ran in verbose mode (`verbose=True`), curl trace lines
(`* `, `> `, `< `, `{ `, `} `) interleaved into the output are removed too.
Without it, body lines that happen to start with those characters are kept.

Example:
    Decoding both conventions:
        ```python
        from fbupload.io.response import decode_response

        decode_response('{"token":"abc"}200')
        # RawResponse(status_code='200', body='{"token":"abc"}')

        decode_response("ok\\n=== CURL STATS ===\\nHTTP_CODE:201\\n", "marker")
        # RawResponse(status_code='201', body='ok')
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Literal

from fbupload.exceptions import ConfigError, MalformedResponseError

__all__ = [
    "CONVENTIONS",
    "RawResponse",
    "ResponseConvention",
    "decode_response",
    "render_write_out",
    "write_out_format",
]

ResponseConvention = Literal["trailing", "marker"]
CONVENTIONS: tuple[str, ...] = ("trailing", "marker")

MARKER = "HTTP_CODE:"
STATS_HEADER = "=== CURL STATS ==="

_WRITE_OUT = {
    "trailing": "%{http_code}",
    "marker": (
        "\n" + STATS_HEADER + "\n"
        "HTTP_CODE:%{http_code}\n"
        "TOTAL_TIME:%{time_total}\n"
        "SIZE_UPLOAD:%{size_upload}\n"
        "SIZE_DOWNLOAD:%{size_download}\n"
    ),
}

_STATUS = re.compile(r"[0-9]{3}")
_MARKER_LINE = re.compile(r"^HTTP_CODE:(\S*)[ \t]*\r?$", re.MULTILINE)
_TRACE_LINE = re.compile(r"^(?:[*<>{}] .*|[*<>])\r?\n?$")
_STATS_HEADER_LINE = re.compile(r"^=== .+ ===\r?\n?$")
_STATS_LINE = re.compile(
    r"^(?:HTTP_CODE|TOTAL_TIME|SIZE_UPLOAD|SIZE_DOWNLOAD|SPEED_UPLOAD|REQUEST_HEADER):"
    r".*\r?\n?$"
)
_VARIABLE = re.compile(r"%\{(\w+)\}")


@dataclass(frozen=True)
class RawResponse:
    """Decoded transport output.

    Attributes:
        status_code: Exactly three ASCII digits (e.g., "201").
        body: Response body with diagnostics removed; "" when empty.
    """

    status_code: str
    body: str

    def ok(self, accepted: tuple[str, ...]) -> bool:
        """Return True if the status code is one of the accepted codes."""
        return self.status_code in accepted


def _check_convention(convention: str) -> None:
    if convention not in CONVENTIONS:
        raise ConfigError(
            f"Unknown response convention: {convention!r}. "
            f"Available: {', '.join(CONVENTIONS)}"
        )


def write_out_format(convention: ResponseConvention = "trailing") -> str:
    """Return the curl write-out directive for a convention.

    Args:
        convention: "trailing" or "marker".

    Returns:
        The string to pass to `curl -w`.

    Raises:
        ConfigError: If the convention is unknown.
    """
    _check_convention(convention)
    return _WRITE_OUT[convention]


def render_write_out(
    convention: ResponseConvention,
    status_code: int,
    stats: dict[str, object] | None = None,
) -> str:
    """Render the write-out trailer the way curl would for a finished request.

    Used by transports that talk HTTP themselves, so their output decodes
    identically to curl's.

    Args:
        convention: "trailing" or "marker".
        status_code: HTTP status code of the response.
        stats: Optional values for other write-out variables (time_total,
            size_upload, size_download). Missing variables render as "0".

    Returns:
        The trailer text to append after the response body.
    """
    values: dict[str, object] = dict(stats or {})
    values["http_code"] = f"{status_code:03d}"

    def _sub(match: re.Match[str]) -> str:
        return str(values.get(match.group(1), "0"))

    return _VARIABLE.sub(_sub, write_out_format(convention))


def _body_lines(text: str, verbose: bool) -> list[str]:
    lines = text.splitlines(keepends=True)
    if verbose:
        lines = [line for line in lines if not _TRACE_LINE.match(line)]
    return lines


def _pop_stats_block(lines: list[str]) -> bool:
    """Remove the statistics block from the end of lines; True if any was."""
    popped = False
    while lines and (
        _STATS_LINE.match(lines[-1]) or _STATS_HEADER_LINE.match(lines[-1])
    ):
        lines.pop()
        popped = True
    return popped


def _drop_newline(body: str) -> str:
    # The write-out directive opens with a newline that is not body text.
    if body.endswith("\r\n"):
        return body[:-2]
    if body.endswith("\n"):
        return body[:-1]
    return body


def _decode_trailing(raw: str, verbose: bool) -> RawResponse:
    text = raw.rstrip("\r\n")
    if len(text) < 3:
        raise MalformedResponseError(
            f"response too short to carry a status code ({len(text)} chars)"
        )
    code = text[-3:]
    if not _STATUS.fullmatch(code):
        raise MalformedResponseError(
            f"response does not end in a 3-digit status code: {code!r}"
        )

    body = text[:-3]
    trimmed = False
    if body == MARKER or body.endswith("\n" + MARKER):
        body = body[: -len(MARKER)]
        trimmed = True
    lines = _body_lines(body, verbose)
    trimmed = _pop_stats_block(lines) or trimmed
    body = "".join(lines)
    return RawResponse(status_code=code, body=_drop_newline(body) if trimmed else body)


def _decode_marker(raw: str, verbose: bool) -> RawResponse:
    matches = list(_MARKER_LINE.finditer(raw))
    if not matches:
        raise MalformedResponseError(f"no {MARKER} marker found in response")
    last = matches[-1]
    code = last.group(1)
    if not _STATUS.fullmatch(code):
        raise MalformedResponseError(f"invalid status code after {MARKER} {code!r}")

    # The body ends where the statistics block that holds the marker begins.
    lines = _body_lines(raw[: last.start()], verbose)
    _pop_stats_block(lines)
    return RawResponse(status_code=code, body=_drop_newline("".join(lines)))


def decode_response(
    raw: str | None,
    convention: ResponseConvention = "trailing",
    *,
    verbose: bool = False,
) -> RawResponse:
    """Split raw transport output into status code and body.

    Args:
        raw: Text returned by the transport (body plus write-out trailer,
            possibly with verbose trace lines interleaved).
        convention: Where the status code lives: "trailing" or "marker".
        verbose: True if the transport merged curl -v trace lines into the
            output; only then are trace lines removed from the body.

    Returns:
        The decoded response. An empty body decodes to "".

    Raises:
        MalformedResponseError: If the output is empty or the status code is
            missing or not three ASCII digits.
        ConfigError: If the convention is unknown.

    Example:
        ```python
        decode_response("204").body  # ""
        decode_response("oops")      # raises MalformedResponseError
        ```
    """
    _check_convention(convention)
    if not raw:
        raise MalformedResponseError("empty response from transport")
    if convention == "marker":
        return _decode_marker(raw, verbose)
    return _decode_trailing(raw, verbose)
