"""
fbupload - FileBrowser upload step

A small Python client that uploads one local file to a FileBrowser server
as a single step of an automation pipeline, reporting a pass/fail outcome.

fbupload provides:
  - Login with username/password for a bearer token (JSON or raw token body)
  - Direct transfer (PUT of raw bytes or multipart POST, always overwriting)
  - Resumable transfer (tus 1.0.0 create + single PATCH)
  - Explicit decoding of curl-style "body + status code" transport output
  - requests and curl transports
  - YAML server profiles and .env-backed credential lookup

Quick Start
-----------
Upload a file:

    $ export FB_DEPLOY_USERNAME=bot FB_DEPLOY_PASSWORD=...
    $ fbupload upload dist/app.zip --url https://files.example.com \\
          --credentials-id deploy --remote-dir /releases

For full CLI documentation:

    $ fbupload --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    Upload orchestration (run, upload_file).
config : package
    YAML server profile loading and merging.
auth : package
    Credential lookup and login.
transfer : package
    Strategy pattern for direct and resumable transfers.
io : package
    Transports, response decoding, file helpers.

Public API
----------
    from fbupload.core import UploadRequest, run, upload_file
    from fbupload.results import ErrorKind, UploadFailure, UploadSuccess
    from fbupload.io import decode_response
    from fbupload.auth import authenticate

License: Apache-2.0
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "FileBrowser upload step for automation pipelines"

# Re-export commonly used functions for convenience
from fbupload.auth import Credential, CredentialStore, authenticate
from fbupload.config import load_profile
from fbupload.core import UploadRequest, run, upload_file
from fbupload.io import decode_response
from fbupload.results import ErrorKind, UploadFailure, UploadOutcome, UploadSuccess

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "Credential",
    "CredentialStore",
    "ErrorKind",
    "UploadFailure",
    "UploadOutcome",
    "UploadRequest",
    "UploadSuccess",
    "authenticate",
    "decode_response",
    "load_profile",
    "run",
    "upload_file",
]
