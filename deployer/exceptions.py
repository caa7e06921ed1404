"""
Exceptions raised by certificate deployers.
"""

from typing import Iterator, List, Sequence


class DeployerError(Exception):
    """Base exception for all deployer failures."""


class ConfigurationError(DeployerError):
    """Deployer could not be constructed from the given configuration."""


class UploadError(DeployerError):
    """Certificate upload to the provider failed."""


class ResolutionError(DeployerError):
    """Target domains could not be resolved from provider state."""


class DomainNotFoundError(ResolutionError):
    """The provider reports no domain eligible for the certificate."""

    def __init__(self, message: str = "domain not found"):
        super().__init__(message)


class AssociationError(DeployerError):
    """Binding the certificate to a single domain failed."""

    def __init__(self, domain: str, cause: BaseException):
        self.domain = domain
        self.cause = cause
        super().__init__(
            f"failed to deploy certificate to domain '{domain}': {cause}"
        )
        self.__cause__ = cause


class AggregatedDeployError(DeployerError):
    """
    One or more domains failed to receive the certificate.

    Holds every per-domain failure in processing order. Rendered as the
    newline-joined messages of all of them.
    """

    def __init__(self, errors: Sequence[AssociationError]):
        if not errors:
            raise ValueError("AggregatedDeployError requires at least one error")
        self.errors: List[AssociationError] = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

    @property
    def domains(self) -> List[str]:
        return [e.domain for e in self.errors]

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[AssociationError]:
        return iter(self.errors)
