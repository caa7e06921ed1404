"""
BytePlus CDN provider.
Uploads certificates to the BytePlus CDN certificate center and binds them
to accelerated domains, including wildcard domains.
"""

from .env_config import BytePlusCDNDeployerConfig, BytePlusCDNUploaderConfig
from .cdn_client import BytePlusAPIError, BytePlusCDNClient
from .uploader import BytePlusCDNUploader
from .deployer import BytePlusCDNDeployer

__all__ = [
    "BytePlusCDNDeployerConfig",
    "BytePlusCDNUploaderConfig",
    "BytePlusAPIError",
    "BytePlusCDNClient",
    "BytePlusCDNUploader",
    "BytePlusCDNDeployer",
]
