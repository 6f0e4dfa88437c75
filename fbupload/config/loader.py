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

"""Server profile loading and merging for fbupload.

A server profile describes how one FileBrowser deployment expects to be
talked to: which transfer strategy it supports, how its login returns the
token, and which transport and response convention to use.

Configuration Layers:

1. **Built-in defaults** (DEFAULT_PROFILE)
   - Direct PUT transfer, auto token format, requests transport,
     trailing status-code convention, 60 s timeout

2. **Profile file** (YAML, optional)
   - Per-deployment settings, typically checked in next to the pipeline

3. **Overrides** (dict, optional)
   - Usually built from CLI flags; highest priority

Merge Behavior:
    Deep merge with "last wins" semantics. Dicts are merged recursively,
    lists and scalars are replaced. None values in overrides are ignored so
    unset CLI flags do not clobber profile values.

Example:
    ```python
    from pathlib import Path
    from fbupload.config import load_profile

    profile = load_profile(
        Path("deploy/filebrowser.yaml"),
        overrides={"server": {"transfer": "resumable"}},
    )
    print(profile["transport"]["convention"])
    ```
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from fbupload.exceptions import ConfigError

DEFAULT_PROFILE: dict[str, Any] = {
    "server": {
        "url": None,
        "transfer": "direct",
        "direct_mode": "put",
        "token_format": "auto",
        "ensure_remote_dir": False,
        "tus_include_dir": False,
    },
    "transport": {
        "backend": "requests",
        "convention": "trailing",
        "timeout": 60,
        "verify_tls": True,
        "curl_path": "curl",
        "curl_verbose": False,
    },
    "credentials": {
        "env_prefix": "FB_",
    },
}

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Load a YAML profile and return the parsed mapping.

    Raises:
      ConfigError - missing file, invalid YAML, empty file, or a top level
                    that is not a mapping
    """
    if not p.exists():
        raise ConfigError(f"profile file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"invalid YAML in profile {p}: {err}") from err
    if data is None:
        raise ConfigError(f"profile file is empty: {p}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"profile {p} must be a mapping, got {type(data).__name__}"
        )
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - None in overlay -> base value kept
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = copy.deepcopy(base)
    for k, v in overlay.items():
        if v is None:
            continue
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = copy.deepcopy(v)
    return result


# -------------------------------
# Public API
# -------------------------------


def load_profile(
    profile_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load the effective server profile.

    Args:
        profile_path: Optional YAML profile. When None, only the built-in
            defaults and overrides apply.
        overrides: Optional nested dict applied last (e.g., from CLI flags).

    Returns:
        The merged profile with "server", "transport", and "credentials"
        sections always present.

    Raises:
        ConfigError: If the profile file is missing, unreadable, or not a
            YAML mapping, or a section is not a mapping.
    """
    profile = copy.deepcopy(DEFAULT_PROFILE)
    if profile_path is not None:
        profile = _deep_merge_dicts(profile, _load_yaml_file(Path(profile_path)))
    if overrides:
        profile = _deep_merge_dicts(profile, overrides)

    for section in DEFAULT_PROFILE:
        if not isinstance(profile.get(section), dict):
            raise ConfigError(f"profile section {section!r} must be a mapping")
    return profile
