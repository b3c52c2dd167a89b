"""Saving a zipped copy of the project on the instance."""

from yala.instance.archive import create_project_archive
from yala.instance.client import InstanceClient, UploadResult

__all__ = [
    "InstanceClient",
    "UploadResult",
    "create_project_archive",
]
