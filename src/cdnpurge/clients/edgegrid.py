"""Akamai EdgeGrid (EG1-HMAC-SHA256) request signing.

The signing scheme:
1. An unsigned auth header is assembled from client token, access token,
   timestamp and a fresh nonce
2. A signing key is derived as HMAC-SHA256(client_secret, timestamp)
3. The canonical request (tab-separated) is signed with the derived key
4. The signature is appended to the auth header

Canonical request:
    METHOD \\t SCHEME \\t HOST \\t PATH+QUERY \\t <headers, unused> \\t CONTENT_HASH \\t AUTH_HEADER

Example:
    signer = EdgeGridSigner(client_token, access_token, client_secret)
    headers["Authorization"] = signer.sign("POST", url, body)
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urlsplit

ALGORITHM = "EG1-HMAC-SHA256"


def edgegrid_timestamp(now: datetime | None = None) -> str:
    """Format a UTC timestamp as ``YYYYMMDDTHH:MM:SS+0000``."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).strftime("%Y%m%dT%H:%M:%S+0000")


def _b64_hmac(key: str, data: str) -> str:
    mac = hmac.new(key.encode("utf-8"), data.encode("utf-8"), hashlib.sha256)
    return base64.b64encode(mac.digest()).decode("ascii")


@dataclass
class SignatureComponents:
    """Request parts covered by the signature."""

    method: str
    url: str
    body: bytes | None
    auth_header: str

    def content_hash(self) -> str:
        """Base64 SHA-256 of the body; only non-empty POST bodies are hashed."""
        if self.method.upper() == "POST" and self.body:
            return base64.b64encode(hashlib.sha256(self.body).digest()).decode("ascii")
        return ""

    def to_canonical_string(self) -> str:
        parts = urlsplit(self.url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        return "\t".join(
            [
                self.method.upper(),
                parts.scheme,
                parts.netloc,
                path,
                "",
                self.content_hash(),
                self.auth_header,
            ]
        )


class EdgeGridSigner:
    """Computes EdgeGrid Authorization headers for outgoing requests."""

    def __init__(self, client_token: str, access_token: str, client_secret: str):
        self.client_token = client_token
        self.access_token = access_token
        self.client_secret = client_secret

    def unsigned_header(self, timestamp: str, nonce: str) -> str:
        pairs = {
            "client_token": self.client_token,
            "access_token": self.access_token,
            "timestamp": timestamp,
            "nonce": nonce,
        }
        joined = "".join(f"{key}={value};" for key, value in pairs.items())
        return f"{ALGORITHM} {joined}"

    def signing_key(self, timestamp: str) -> str:
        return _b64_hmac(self.client_secret, timestamp)

    def sign(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        timestamp: str | None = None,
        nonce: str | None = None,
    ) -> str:
        """Return the complete Authorization header value.

        Args:
            method: HTTP method
            url: Absolute request URL
            body: Request body bytes exactly as sent
            timestamp: EdgeGrid timestamp (defaults to now)
            nonce: Request nonce (defaults to a fresh UUID4)
        """
        timestamp = timestamp or edgegrid_timestamp()
        nonce = nonce or str(uuid.uuid4())

        auth_header = self.unsigned_header(timestamp, nonce)
        components = SignatureComponents(
            method=method, url=url, body=body, auth_header=auth_header
        )
        signature = _b64_hmac(self.signing_key(timestamp), components.to_canonical_string())
        return f"{auth_header}signature={signature}"
