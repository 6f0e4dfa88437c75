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

"""Command-line interface for fbupload.

Commands:

    upload: Upload one file to a FileBrowser server
    validate-profile: Check a server profile without network access

Example:
    Upload with credentials from FB_DEPLOY_BOT_USERNAME/PASSWORD:
        ```bash
        $ fbupload upload dist/app.zip --url https://files.example.com \\
              --credentials-id deploy-bot --remote-dir /releases
        ```

    Use the resumable protocol and a checked-in profile:
        ```bash
        $ fbupload upload dist/app.zip --profile deploy/fb.yaml \\
              --credentials-id deploy-bot --transfer resumable
        ```

    Validate a profile:
        ```bash
        $ fbupload validate-profile deploy/fb.yaml
        ```

Exit Codes:

- 0: Success
- 1: Failure (invalid arguments, missing file, login or upload failure)

Note:
    Verbose mode shows step details and full tracebacks for unexpected
    configuration errors. Debug mode implies verbose mode.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
from typing import Any

from fbupload import __version__
from fbupload.config import load_profile
from fbupload.core import upload_file
from fbupload.exceptions import FBUploadError
from fbupload.logging import get_logger, set_global_logger
from fbupload.results import UploadFailure
from fbupload.validation import validate_profile_file


def _package_version() -> str:
    try:
        return version("fbupload")
    except PackageNotFoundError:
        return __version__


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Map CLI flags onto profile sections; unset flags stay None."""
    return {
        "server": {
            "transfer": args.transfer,
            "direct_mode": args.direct_mode,
            "token_format": args.token_format,
        },
        "transport": {
            "backend": args.transport,
            "convention": args.convention,
            "timeout": args.timeout,
        },
    }


def cmd_upload(args: argparse.Namespace) -> int:
    """Handler for 'fbupload upload' command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        profile = load_profile(
            Path(args.profile) if args.profile else None,
            overrides=_overrides_from_args(args),
        )
    except FBUploadError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            import traceback

            traceback.print_exc()
        return 1

    logger.debug("CONFIG", f"Effective profile: {profile}")

    outcome = upload_file(
        args.url,
        args.file,
        args.credentials_id,
        remote_dir=args.remote_dir,
        profile=profile,
        logger=logger,
    )

    if isinstance(outcome, UploadFailure):
        print(f"[FAILED] {outcome.message}")
        return 1

    print("=" * 70)
    print("UPLOAD RESULTS")
    print("=" * 70)
    print(f"File:            {Path(args.file).name}")
    print(f"Transfer:        {profile['server']['transfer']}")
    print(f"Access URL:      {outcome.access_url}")
    print("=" * 70)
    print()
    print("[SUCCESS] File uploaded successfully!")
    return 0


def cmd_validate_profile(args: argparse.Namespace) -> int:
    """Handler for 'fbupload validate-profile' command.

    Args:
        args: Parsed command-line arguments containing the profile path.

    Returns:
        Exit code (0 for a valid profile, 1 otherwise).
    """
    set_global_logger(get_logger(verbose=args.verbose))
    profile_path = Path(args.profile).resolve()

    print(f"Validating profile: {profile_path}")
    print()

    result = validate_profile_file(profile_path)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Profile:     {result.profile_path}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Profile is valid!")
        return 0
    print()
    print(f"[FAILED] Profile validation failed with {len(result.errors)} error(s).")
    return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="fbupload",
        description="Upload files to a FileBrowser server from automation pipelines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"fbupload {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'upload' command
    parser_upload = subparsers.add_parser(
        "upload",
        help="Upload one file to a FileBrowser server",
        description="Log in to FileBrowser and upload a local file, overwriting any existing file.",
    )
    parser_upload.add_argument("file", help="Path to the local file to upload")
    parser_upload.add_argument(
        "--url",
        default=None,
        help="FileBrowser base URL, http:// or https:// (default: profile server.url)",
    )
    parser_upload.add_argument(
        "--credentials-id",
        required=True,
        help="Credential identifier resolved from FB_<ID>_USERNAME / FB_<ID>_PASSWORD",
    )
    parser_upload.add_argument(
        "--remote-dir",
        default="/",
        help="Target directory on the server (default: /)",
    )
    parser_upload.add_argument(
        "--profile",
        default=None,
        help="YAML server profile",
    )
    parser_upload.add_argument(
        "--transfer",
        choices=["direct", "resumable"],
        default=None,
        help="Transfer strategy (default: from profile, or direct)",
    )
    parser_upload.add_argument(
        "--direct-mode",
        choices=["put", "multipart"],
        default=None,
        help="Request style for direct transfers (default: put)",
    )
    parser_upload.add_argument(
        "--token-format",
        choices=["auto", "json", "raw"],
        default=None,
        help="How the login response carries the token (default: auto)",
    )
    parser_upload.add_argument(
        "--transport",
        choices=["requests", "curl"],
        default=None,
        help="HTTP backend (default: requests)",
    )
    parser_upload.add_argument(
        "--convention",
        choices=["trailing", "marker"],
        default=None,
        help="Status-code convention in raw transport output (default: trailing)",
    )
    parser_upload.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 60)",
    )
    parser_upload.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_upload.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_upload.set_defaults(func=cmd_upload)

    # 'validate-profile' command
    parser_validate = subparsers.add_parser(
        "validate-profile",
        help="Validate a server profile (no network calls)",
        description="Check a YAML server profile for syntax errors and invalid settings.",
    )
    parser_validate.add_argument("profile", help="Path to the YAML profile")
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate_profile)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the fbupload CLI.

    This function is registered as the 'fbupload' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
