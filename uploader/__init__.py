"""
Certificate uploader contract.
"""

from .contracts import Uploader, UploadResult

__all__ = ["Uploader", "UploadResult"]
