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

"""Request and profile validation.

Nothing in this module touches the network or the local file system (apart
from reading the profile file itself in validate_profile_file), so it is
safe to run as an early gate or a CI pre-check.

Validation Checks:

- Server URL is present and starts with http:// or https://
- Local file path and credential are present
- Profile values are from the allowed sets (transfer strategy, direct mode,
  token format, transport backend, response convention)
- Transport timeout is a positive number
- Strategy-specific options pass the strategy's own validate_config()

Example:
    ```python
    from pathlib import Path
    from fbupload.validation import validate_profile_file

    result = validate_profile_file(Path("deploy/filebrowser.yaml"))
    if result.status == "invalid":
        for error in result.errors:
            print(f"Error: {error}")
    ```
"""

from __future__ import annotations

from pathlib import Path
import re
from typing import Any

from fbupload.auth.login import TOKEN_FORMATS
from fbupload.config.loader import load_profile
from fbupload.exceptions import ConfigError
from fbupload.io.response import CONVENTIONS
from fbupload.results import ValidationResult
from fbupload.transfer import available_strategies, get_strategy

__all__ = ["URL_PATTERN", "validate_profile", "validate_profile_file", "validate_request"]

URL_PATTERN = re.compile(r"^https?://.+")

BACKENDS = ("requests", "curl")


def validate_request(
    server_base_url: str | None,
    local_file_path: str | Path | None,
    credential: Any,
) -> list[str]:
    """Check upload arguments before any file system or network access.

    Returns:
        List of error messages (empty if the arguments are valid).
    """
    errors = []
    if not server_base_url:
        errors.append("server URL is required")
    elif not URL_PATTERN.match(server_base_url):
        errors.append(
            f"server URL must start with http:// or https://, got {server_base_url!r}"
        )
    if not local_file_path:
        errors.append("local file path is required")
    if credential is None:
        errors.append("credential is required")
    return errors


def _check_choice(errors: list[str], key: str, value: Any, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        errors.append(f"{key} must be one of {', '.join(allowed)}, got {value!r}")


def validate_profile(profile: dict[str, Any]) -> list[str]:
    """Validate a merged profile.

    Args:
        profile: Profile as returned by load_profile().

    Returns:
        List of error messages (empty if the profile is valid).
    """
    errors: list[str] = []
    server = profile.get("server", {})
    transport = profile.get("transport", {})

    url = server.get("url")
    if url is not None and not URL_PATTERN.match(str(url)):
        errors.append(f"server.url must start with http:// or https://, got {url!r}")

    transfer = server.get("transfer")
    _check_choice(errors, "server.transfer", transfer, tuple(available_strategies()))
    if transfer in available_strategies():
        errors.extend(get_strategy(transfer).validate_config(server))
    _check_choice(errors, "server.token_format", server.get("token_format"), TOKEN_FORMATS)
    if not isinstance(server.get("ensure_remote_dir", False), bool):
        errors.append("server.ensure_remote_dir must be true or false")

    _check_choice(errors, "transport.backend", transport.get("backend"), BACKENDS)
    _check_choice(errors, "transport.convention", transport.get("convention"), CONVENTIONS)

    timeout = transport.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        errors.append(f"transport.timeout must be a positive number, got {timeout!r}")

    return errors


def validate_profile_file(profile_path: Path) -> ValidationResult:
    """Load and validate a profile file.

    Args:
        profile_path: Path to the YAML profile.

    Returns:
        ValidationResult with status "valid" or "invalid".
    """
    warnings: list[str] = []
    try:
        profile = load_profile(profile_path)
    except ConfigError as err:
        return ValidationResult(
            status="invalid",
            errors=[str(err)],
            warnings=warnings,
            profile_path=str(profile_path),
        )

    errors = validate_profile(profile)

    server = profile["server"]
    if not server.get("url"):
        warnings.append("server.url not set; --url must be given on every upload")
    if (
        profile["transport"].get("backend") == "curl"
        and profile["transport"].get("curl_verbose")
        and profile["transport"].get("convention") == "trailing"
    ):
        warnings.append(
            "curl_verbose with the trailing convention is fragile; "
            "use convention: marker"
        )

    return ValidationResult(
        status="valid" if not errors else "invalid",
        errors=errors,
        warnings=warnings,
        profile_path=str(profile_path),
    )
