"""Error responses for the purge API.

Errors are returned as ``{"error": "<message>"}`` with the message repeated
in the ``x-error`` header so it shows up in edge and proxy logs.
"""

from __future__ import annotations

from fastapi.responses import ORJSONResponse


def _header_value(message: str) -> str:
    # provider bodies may span lines or carry non latin-1 text
    single_line = " ".join(message.split())
    return single_line.encode("latin-1", errors="replace").decode("latin-1")


def error_response(status_code: int, message: str) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content={"error": message},
        headers={"x-error": _header_value(message)},
    )
