"""
BytePlus CDN OpenAPI client.
Covers the certificate endpoints used for uploading and deploying certificates.
"""

import json
from typing import Any, Dict, Optional

import requests

from log import init_logger

from .env_config import DEFAULT_ENDPOINT, DEFAULT_REGION, DEFAULT_TIMEOUT
from .signer import RequestSigner

logger = init_logger(__name__)

API_VERSION = "2021-03-01"
SERVICE_NAME = "CDN"


class BytePlusAPIError(Exception):
    """A BytePlus OpenAPI call failed."""

    def __init__(
        self,
        action: str,
        message: str,
        code: Optional[str] = None,
        request_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.action = action
        self.code = code
        self.message = message
        self.request_id = request_id
        self.status_code = status_code

        detail = f"Code: {code}, Message: {message}" if code else message
        if request_id:
            detail += f", RequestId: {request_id}"
        super().__init__(f"{action}: {detail}")


class BytePlusCDNClient:
    """Thin client for the BytePlus CDN OpenAPI."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        region: str = DEFAULT_REGION,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            access_key: BytePlus access key
            secret_key: BytePlus secret key
            region: API region
            endpoint: API host name
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.signer = RequestSigner(access_key, secret_key, region, SERVICE_NAME)
        self.session = session or requests.Session()

    def _make_request(self, action: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Call an API action and return its Result object."""
        query = {"Action": action, "Version": API_VERSION}
        data = json.dumps(body).encode("utf-8")
        headers = self.signer.sign("POST", self.endpoint, query, data)
        url = f"https://{self.endpoint}/"

        logger.debug(f"Calling BytePlus CDN action {action}")
        try:
            response = self.session.post(
                url, params=query, data=data, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request Error: {action}: {e}")
            raise BytePlusAPIError(action, str(e)) from e

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"JSON Decode Error: could not parse {action} response")
            raise BytePlusAPIError(
                action,
                f"could not parse response (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

        if not isinstance(result, dict):
            logger.error(f"Unexpected {action} response: {type(result).__name__} body")
            raise BytePlusAPIError(
                action, "unexpected response shape", status_code=response.status_code
            )

        metadata = result.get("ResponseMetadata")
        if metadata is None:
            metadata = {}
        if not isinstance(metadata, dict):
            raise BytePlusAPIError(
                action, "unexpected response shape", status_code=response.status_code
            )

        error = metadata.get("Error")
        if error and not isinstance(error, dict):
            logger.error(f"API Error: {action}: {error}")
            raise BytePlusAPIError(
                action,
                str(error),
                request_id=metadata.get("RequestId"),
                status_code=response.status_code,
            )
        if error:
            logger.error(
                f"API Error: {action}: Code: {error.get('Code')}, Message: {error.get('Message')}"
            )
            raise BytePlusAPIError(
                action,
                error.get("Message", ""),
                code=error.get("Code"),
                request_id=metadata.get("RequestId"),
                status_code=response.status_code,
            )

        if not response.ok:
            raise BytePlusAPIError(
                action,
                f"unexpected HTTP status {response.status_code}",
                request_id=metadata.get("RequestId"),
                status_code=response.status_code,
            )

        payload = result.get("Result")
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise BytePlusAPIError(
                action,
                "unexpected response shape",
                request_id=metadata.get("RequestId"),
                status_code=response.status_code,
            )
        return payload

    def describe_cert_config(self, cert_id: str) -> Dict[str, Any]:
        """
        Get the domains a certificate can be bound to, split by current binding.

        Returns:
            Result with CertNotConfig, OtherCertConfig and SpecifiedCertConfig lists
        """
        return self._make_request("DescribeCertConfig", {"CertId": cert_id})

    def batch_deploy_cert(self, cert_id: str, domain: str) -> Dict[str, Any]:
        """Bind a certificate to an accelerated domain."""
        return self._make_request(
            "BatchDeployCert", {"CertId": cert_id, "Domain": domain}
        )

    def list_cert_info(
        self, page_num: int = 1, page_size: int = 100, source: str = "cert_center"
    ) -> Dict[str, Any]:
        """List certificates hosted in the certificate center."""
        return self._make_request(
            "ListCertInfo",
            {"PageNum": page_num, "PageSize": page_size, "Source": source},
        )

    def add_certificate(
        self,
        certificate: str,
        private_key: str,
        source: str = "cert_center",
        desc: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Upload a certificate and its private key."""
        body = {
            "Certificate": certificate,
            "PrivateKey": private_key,
            "Source": source,
        }
        if desc:
            body["Desc"] = desc
        return self._make_request("AddCertificate", body)
