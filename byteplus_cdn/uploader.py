"""
Uploads certificates to the BytePlus CDN certificate center.
Reuses an already hosted certificate when its fingerprints match.
"""

import hashlib
import time
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding

from deployer.exceptions import ConfigurationError, UploadError
from log import init_logger
from uploader import Uploader, UploadResult

from .cdn_client import BytePlusAPIError, BytePlusCDNClient
from .env_config import BytePlusCDNUploaderConfig

logger = init_logger(__name__)

CERT_SOURCE = "cert_center"
LIST_PAGE_SIZE = 100


class BytePlusCDNUploader(Uploader):
    """Uploader backed by the BytePlus CDN OpenAPI."""

    def __init__(
        self,
        config: BytePlusCDNUploaderConfig,
        client: Optional[BytePlusCDNClient] = None,
    ):
        if config is None:
            raise ConfigurationError("config is nil")

        errors = config.validate()
        if errors:
            raise ConfigurationError(f"invalid uploader config: {'; '.join(errors)}")

        self.config = config
        self.client = client or BytePlusCDNClient(
            config.access_key,
            config.secret_key,
            region=config.region,
            endpoint=config.endpoint,
            timeout=config.timeout,
        )

    def upload(self, cert_pem: str, privkey_pem: str) -> UploadResult:
        try:
            cert = x509.load_pem_x509_certificate(cert_pem.encode("utf-8"))
        except ValueError as e:
            raise UploadError(f"failed to parse certificate: {e}") from e

        der = cert.public_bytes(Encoding.DER)
        sha1 = hashlib.sha1(der).hexdigest()
        sha256 = hashlib.sha256(der).hexdigest()

        existing = self._find_existing(sha1, sha256)
        if existing:
            logger.info(f"Certificate already uploaded as {existing.cert_id}, reusing it")
            return existing

        cert_name = f"certdeploy-{int(time.time() * 1000)}"
        try:
            result = self.client.add_certificate(
                cert_pem, privkey_pem, source=CERT_SOURCE, desc=cert_name
            )
        except BytePlusAPIError as e:
            raise UploadError(
                f"failed to execute sdk request 'cdn.AddCertificate': {e}"
            ) from e

        cert_id = result.get("CertId")
        if not cert_id:
            raise UploadError("'cdn.AddCertificate' returned no certificate id")

        logger.info(f"Uploaded certificate {cert_name} as {cert_id}")
        return UploadResult(cert_id=cert_id, cert_name=cert_name)

    def _find_existing(self, sha1: str, sha256: str) -> Optional[UploadResult]:
        """Page through hosted certificates looking for a fingerprint match."""
        page_num = 1
        seen = 0

        while True:
            try:
                result = self.client.list_cert_info(
                    page_num=page_num, page_size=LIST_PAGE_SIZE, source=CERT_SOURCE
                )
            except BytePlusAPIError as e:
                raise UploadError(
                    f"failed to execute sdk request 'cdn.ListCertInfo': {e}"
                ) from e

            cert_infos = result.get("CertInfo") or []
            for info in cert_infos:
                fingerprint = info.get("CertFingerprint") or {}
                if (
                    sha1.lower() == (fingerprint.get("Sha1") or "").lower()
                    and sha256.lower() == (fingerprint.get("Sha256") or "").lower()
                ):
                    return UploadResult(
                        cert_id=info.get("CertId", ""), cert_name=info.get("Desc", "")
                    )

            seen += len(cert_infos)
            total = result.get("Total", 0)
            if not cert_infos or len(cert_infos) < LIST_PAGE_SIZE or seen >= total:
                return None

            page_num += 1
