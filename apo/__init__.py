"""Azure Prod Ops: a terminal dashboard for Azure DevOps."""

__version__ = "0.3.0"
