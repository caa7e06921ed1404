"""
Certificate deployer contracts.
Defines the Deployer capability, its logger sink and the error taxonomy
shared by every provider implementation.
"""

from .contracts import Deployer, DeployResult
from .exceptions import (
    AggregatedDeployError,
    AssociationError,
    ConfigurationError,
    DeployerError,
    DomainNotFoundError,
    ResolutionError,
    UploadError,
)
from .logger import DefaultLogger, DeployerLogger, NilLogger

__all__ = [
    "Deployer",
    "DeployResult",
    "DeployerLogger",
    "DefaultLogger",
    "NilLogger",
    "DeployerError",
    "ConfigurationError",
    "UploadError",
    "ResolutionError",
    "DomainNotFoundError",
    "AssociationError",
    "AggregatedDeployError",
]
