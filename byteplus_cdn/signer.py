"""
HMAC-SHA256 request signing for the BytePlus OpenAPI gateway.
"""

import hashlib
import hmac
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional
from urllib.parse import quote

ALGORITHM = "HMAC-SHA256"
SIGNED_HEADERS = ("content-type", "host", "x-content-sha256", "x-date")


def _hmac_sha256(key: bytes, content: str) -> bytes:
    return hmac.new(key, content.encode("utf-8"), hashlib.sha256).digest()


def _sha256_hex(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def _canonical_query(query: Mapping[str, str]) -> str:
    return "&".join(
        f"{quote(str(k), safe='-_.~')}={quote(str(v), safe='-_.~')}"
        for k, v in sorted(query.items())
    )


class RequestSigner:
    """Signs OpenAPI requests for a single service and region."""

    def __init__(self, access_key: str, secret_key: str, region: str, service: str):
        self.access_key = access_key
        self._secret_key = secret_key
        self.region = region
        self.service = service

    def sign(
        self,
        method: str,
        host: str,
        query: Mapping[str, str],
        body: bytes,
        content_type: str = "application/json",
        path: str = "/",
        now: Optional[datetime] = None,
    ) -> Dict[str, str]:
        """
        Build the headers for a signed request.

        Args:
            method: HTTP method
            host: Endpoint host name
            query: Query string parameters
            body: Raw request body
            content_type: Body content type
            path: Request path
            now: Signing time, defaults to the current UTC time

        Returns:
            Headers including Authorization
        """
        now = now or datetime.now(timezone.utc)
        x_date = now.strftime("%Y%m%dT%H%M%SZ")
        short_date = x_date[:8]
        payload_hash = _sha256_hex(body)

        headers = {
            "content-type": content_type,
            "host": host,
            "x-content-sha256": payload_hash,
            "x-date": x_date,
        }

        canonical_headers = "".join(f"{name}:{headers[name].strip()}\n" for name in SIGNED_HEADERS)
        signed_headers = ";".join(SIGNED_HEADERS)
        canonical_request = "\n".join(
            [
                method.upper(),
                path,
                _canonical_query(query),
                canonical_headers,
                signed_headers,
                payload_hash,
            ]
        )

        scope = f"{short_date}/{self.region}/{self.service}/request"
        string_to_sign = "\n".join(
            [ALGORITHM, x_date, scope, _sha256_hex(canonical_request.encode("utf-8"))]
        )

        k_date = _hmac_sha256(self._secret_key.encode("utf-8"), short_date)
        k_region = _hmac_sha256(k_date, self.region)
        k_service = _hmac_sha256(k_region, self.service)
        k_signing = _hmac_sha256(k_service, "request")
        signature = hmac.new(
            k_signing, string_to_sign.encode("utf-8"), hashlib.sha256
        ).hexdigest()

        return {
            "Content-Type": content_type,
            "Host": host,
            "X-Content-Sha256": payload_hash,
            "X-Date": x_date,
            "Authorization": (
                f"{ALGORITHM} Credential={self.access_key}/{scope}, "
                f"SignedHeaders={signed_headers}, Signature={signature}"
            ),
        }
