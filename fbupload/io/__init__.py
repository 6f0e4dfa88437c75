"""Input/Output operations for fbupload.

This package contains everything that touches the network or the local
file system on behalf of the upload strategies.

Modules:

response : module
    Decoding raw transport output into RawResponse (status code + body).
transport : module
    HTTP execution primitives (requests and curl backends).
files : module
    File name, size formatting, and remote path composition helpers.

Example:
    from fbupload.io import RequestsTransport, decode_response

    transport = RequestsTransport()
    raw = transport.execute("GET", "https://files.example.com/", {})
    print(decode_response(raw, transport.convention).status_code)

"""

from .files import file_name, format_size, normalize_remote_dir, remote_path
from .response import RawResponse, decode_response, write_out_format
from .transport import (
    CurlTransport,
    RequestsTransport,
    Transport,
    make_session,
    make_transport,
)

__all__ = [
    "CurlTransport",
    "RawResponse",
    "RequestsTransport",
    "Transport",
    "decode_response",
    "file_name",
    "format_size",
    "make_session",
    "make_transport",
    "normalize_remote_dir",
    "remote_path",
    "write_out_format",
]
