"""
Multipart form-data extraction.

Pulls a single uploaded file out of a raw multipart/form-data body without
a form parsing library. Works on text lines (CRLF or LF), so it targets CSV
and other text uploads; binary parts are not reproduced byte-for-byte.

Dependencies: re
System role: First stage of the upload path (raw HTTP body -> file bytes)
"""

import logging
import re

from csv_processor.core.exceptions import BadRequestError, InternalError

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "uploaded_file.csv"

_BOUNDARY_PARAM = re.compile(r"boundary\s*=\s*(\"[^\"]*\"|[^;\s]+)", re.IGNORECASE)
_QUOTED_FILENAME = re.compile(r'filename="([^"]+)"')
_BARE_FILENAME = re.compile(r"filename=([^\r\n;]+)")
_TRAILING_DASHES = re.compile(r"-+\s*$")
_LINE_SPLIT = re.compile(r"\r\n|\n")


def extract_boundary(content_type: str | None) -> str | None:
    """
    Read the boundary parameter from a Content-Type header.

    Args:
        content_type: Raw Content-Type header value

    Returns:
        str | None: Boundary without quotes, or None when absent
    """
    if not content_type:
        return None
    match = _BOUNDARY_PARAM.search(content_type)
    if not match:
        return None
    boundary = match.group(1).strip().strip('"').strip()
    return boundary or None


def sniff_boundary(raw_body: bytes) -> str | None:
    """
    Derive the boundary from the first line of the body.

    A multipart body opens with ``--{boundary}``; the remainder of that
    line after the leading dashes is returned.
    """
    first_line = raw_body.split(b"\n", 1)[0].rstrip(b"\r")
    if not first_line.startswith(b"--"):
        return None
    boundary = first_line[2:].decode("utf-8", errors="replace").strip()
    return boundary or None


def _file_name_from_part(part: str) -> str:
    match = _QUOTED_FILENAME.search(part) or _BARE_FILENAME.search(part)
    if not match:
        return DEFAULT_FILE_NAME
    return match.group(1).strip() or DEFAULT_FILE_NAME


def _content_from_part(part: str) -> str | None:
    """Return everything after the first blank line of a part, trailers stripped."""
    lines = _LINE_SPLIT.split(part)
    content_start = -1
    # lines[0] is the tail of the delimiter line itself.
    for index, line in enumerate(lines[1:], start=1):
        if not line.strip():
            content_start = index + 1
            break

    if content_start <= 0 or content_start >= len(lines):
        return None

    content = "\n".join(lines[content_start:])
    content = _TRAILING_DASHES.sub("", content)
    return content.rstrip("\r\n")


def _parse_parts(body_text: str, boundary: str) -> tuple[str, bytes] | None:
    for part in body_text.split(f"--{boundary}"):
        if "Content-Disposition" not in part or "filename=" not in part:
            continue
        content = _content_from_part(part)
        if content is None:
            continue
        # Single-file uploads only; later parts are ignored.
        return _file_name_from_part(part), content.encode("utf-8")
    return None


def extract_multipart_file(content_type: str | None, raw_body: bytes) -> tuple[str, bytes]:
    """
    Extract the uploaded file name and bytes from a multipart body.

    Boundary resolution prefers the Content-Type header and falls back to
    sniffing the first body line. The first part carrying both a
    Content-Disposition header and a filename parameter wins.

    Args:
        content_type: Content-Type header (may be None)
        raw_body: Full request body

    Returns:
        tuple[str, bytes]: (file_name, file_bytes)

    Raises:
        BadRequestError: Missing boundary, no file part, or empty content
        InternalError: Unexpected failure while parsing
    """
    boundary = extract_boundary(content_type) or sniff_boundary(raw_body or b"")
    if not boundary:
        raise BadRequestError(
            "missing boundary",
            field="content-type",
            details={"content_type": content_type},
        )

    try:
        body_text = raw_body.decode("utf-8", errors="replace")
        parsed = _parse_parts(body_text, boundary)
    except Exception as e:
        logger.exception(
            "Unexpected error parsing multipart body",
            extra={"boundary": boundary, "error_type": type(e).__name__},
        )
        raise InternalError("Error parsing multipart form data") from e

    if parsed is None:
        raise BadRequestError("No file found in request")

    file_name, file_bytes = parsed
    if not file_bytes:
        raise BadRequestError("No file found in request", details={"file_name": file_name})

    logger.debug(
        "Extracted multipart file",
        extra={"file_name": file_name, "size_bytes": len(file_bytes)},
    )
    return file_name, file_bytes
