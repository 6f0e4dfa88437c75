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

"""Local file and remote path helpers."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

__all__ = [
    "file_name",
    "format_size",
    "normalize_remote_dir",
    "remote_path",
]

_UNITS = ((1024**3, "GB"), (1024**2, "MB"), (1024, "KB"))


def file_name(local_path: str | Path) -> str:
    """Return the last path component of a local file path."""
    return Path(local_path).name


def format_size(size: int) -> str:
    """Format a byte count as B/KB/MB/GB using whole units.

    Example:
        ```python
        format_size(512)        # "512B"
        format_size(5 * 1024)   # "5KB"
        ```
    """
    for factor, unit in _UNITS:
        if size >= factor:
            return f"{size // factor}{unit}"
    return f"{size}B"


def normalize_remote_dir(remote_dir: str | None) -> str:
    """Normalize a remote directory to "/a/b" form, or "" for the root.

    Repeated separators are collapsed and a trailing separator is dropped,
    so callers append exactly one "/" before a file name.

    Example:
        ```python
        normalize_remote_dir("/")         # ""
        normalize_remote_dir("docs//v1/") # "/docs/v1"
        ```
    """
    parts = [p for p in (remote_dir or "/").split("/") if p]
    if not parts:
        return ""
    return "/" + "/".join(parts)


def remote_path(remote_dir: str | None, name: str, *, quoted: bool = False) -> str:
    """Join a remote directory and a file name with exactly one separator.

    Args:
        remote_dir: Remote directory in any form normalize_remote_dir accepts.
        name: File name.
        quoted: If True, percent-encode the result for use in an API URL.
    """
    path = f"{normalize_remote_dir(remote_dir)}/{name}"
    return quote(path, safe="/") if quoted else path
