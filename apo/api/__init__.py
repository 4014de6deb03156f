"""Azure DevOps REST API access."""

from .client import AzureDevOpsClient

__all__ = ["AzureDevOpsClient"]
