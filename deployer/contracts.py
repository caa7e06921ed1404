"""
Deployer capability and the result it produces.
"""

import abc
from dataclasses import dataclass


@dataclass
class DeployResult:
    """Returned by a successful deployment. Carries no payload."""


class Deployer(metaclass=abc.ABCMeta):
    """Pushes an issued certificate to a provider and activates it."""

    @abc.abstractmethod
    def deploy(self, cert_pem: str, privkey_pem: str) -> DeployResult:
        """
        Deploy a certificate.

        Args:
            cert_pem: PEM encoded certificate (chain)
            privkey_pem: PEM encoded private key

        Returns:
            DeployResult on success

        Raises:
            DeployerError: On any failure
        """
        raise NotImplementedError
