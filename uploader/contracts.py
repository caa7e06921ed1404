import abc
from dataclasses import dataclass


@dataclass
class UploadResult:
    """Identifier assigned by the provider to an uploaded certificate."""

    cert_id: str
    cert_name: str = ""


class Uploader(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def upload(self, cert_pem: str, privkey_pem: str) -> UploadResult:
        """
        Upload a certificate and its private key to the provider.

        Returns:
            UploadResult with the provider certificate id

        Raises:
            Exception: If the provider rejects the certificate or is unreachable
        """
        raise NotImplementedError
