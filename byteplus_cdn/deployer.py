"""
Deploys certificates to BytePlus CDN accelerated domains.
Uploads the certificate, resolves which domains need it and binds it to each.
"""

from typing import Any, List, Optional

from deployer.contracts import Deployer, DeployResult
from deployer.exceptions import (
    AggregatedDeployError,
    AssociationError,
    ConfigurationError,
    DomainNotFoundError,
    ResolutionError,
    UploadError,
)
from deployer.logger import DeployerLogger, NilLogger
from log import init_logger
from uploader import Uploader

from .cdn_client import BytePlusAPIError, BytePlusCDNClient
from .env_config import BytePlusCDNDeployerConfig, is_wildcard_domain
from .uploader import BytePlusCDNUploader

logger = init_logger(__name__)


def _domain_names(entries: Any, partition: str) -> List[str]:
    if entries is None:
        return []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ResolutionError(
            f"unexpected 'cdn.DescribeCertConfig' response shape in {partition}"
        )
    return [entry.get("Domain") for entry in entries if entry.get("Domain")]


class BytePlusCDNDeployer(Deployer):
    """Binds uploaded certificates to BytePlus CDN domains."""

    def __init__(
        self,
        config: BytePlusCDNDeployerConfig,
        logger: Optional[DeployerLogger] = None,
        client: Optional[BytePlusCDNClient] = None,
        uploader: Optional[Uploader] = None,
    ):
        """
        Initialize the deployer.

        Args:
            config: Deployer configuration
            logger: Progress sink, discards records when omitted
            client: Optional pre-built OpenAPI client
            uploader: Optional uploader, built from the same credentials when omitted

        Raises:
            ConfigurationError: If the config is missing or invalid, or the
                uploader cannot be created
        """
        if config is None:
            raise ConfigurationError("config is nil")

        if logger is None:
            logger = NilLogger()
        elif not callable(getattr(logger, "logt", None)):
            raise ConfigurationError("logger must provide logt()")

        errors = config.validate()
        if errors:
            raise ConfigurationError(f"invalid deployer config: {'; '.join(errors)}")

        self.config = config
        self.logger = logger
        self.client = client or BytePlusCDNClient(
            config.access_key,
            config.secret_key,
            region=config.region,
            endpoint=config.endpoint,
            timeout=config.timeout,
        )

        if uploader is None:
            try:
                uploader = BytePlusCDNUploader(
                    config.to_uploader_config(), client=self.client
                )
            except Exception as e:
                raise ConfigurationError(f"failed to create ssl uploader: {e}") from e
        self.uploader = uploader

    def deploy(self, cert_pem: str, privkey_pem: str) -> DeployResult:
        try:
            upres = self.uploader.upload(cert_pem, privkey_pem)
        except Exception as e:
            raise UploadError(f"failed to upload certificate file: {e}") from e

        self.logger.logt("certificate file uploaded", upres)

        domains = self.resolve_domains(upres.cert_id, self.config.domain)
        self.associate_domains(upres.cert_id, domains)

        logger.info(
            f"Certificate {upres.cert_id} deployed to {len(domains)} domain(s) "
            f"for {self.config.domain}"
        )
        return DeployResult()

    def resolve_domains(self, cert_id: str, domain_pattern: str) -> List[str]:
        """
        Get the domains that must be bound to the certificate.

        Exact domains are returned as-is. Wildcards are expanded from the
        provider's view of which domains the certificate covers, skipping
        domains that already carry this certificate.

        Args:
            cert_id: Provider certificate id
            domain_pattern: Exact domain or "*.<suffix>" wildcard

        Returns:
            Domains to bind, empty if every eligible domain is already bound

        Raises:
            ResolutionError: If the provider query fails
            DomainNotFoundError: If no domain is eligible for the certificate
        """
        if not is_wildcard_domain(domain_pattern):
            return [domain_pattern]

        try:
            result = self.client.describe_cert_config(cert_id)
        except BytePlusAPIError as e:
            raise ResolutionError(
                f"failed to execute sdk request 'cdn.DescribeCertConfig': {e}"
            ) from e

        domains = _domain_names(result.get("CertNotConfig"), "CertNotConfig")
        domains.extend(_domain_names(result.get("OtherCertConfig"), "OtherCertConfig"))

        if not domains:
            configured = _domain_names(result.get("SpecifiedCertConfig"), "SpecifiedCertConfig")
            if not configured:
                logger.error(f"No domain matching {domain_pattern} accepts certificate {cert_id}")
                raise DomainNotFoundError()
            logger.info(
                f"All {len(configured)} domain(s) already use certificate {cert_id}, skipping"
            )

        return domains

    def associate_domains(self, cert_id: str, domains: List[str]) -> None:
        """
        Bind the certificate to every domain, continuing past failures.

        Raises:
            AggregatedDeployError: If one or more domains failed
        """
        errors: List[AssociationError] = []

        for domain in domains:
            try:
                response = self.client.batch_deploy_cert(cert_id, domain)
            except Exception as e:
                logger.warning(f"Failed to deploy certificate {cert_id} to {domain}: {e}")
                errors.append(AssociationError(domain, e))
                continue

            self.logger.logt(f"certificate deployed to domain {domain}", response)

        if errors:
            raise AggregatedDeployError(errors)
