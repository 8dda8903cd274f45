"""Errors raised by the deployment framework."""


class DeploymentFrameworkError(Exception):
    """Base class for all deployment framework errors"""


class ConfigurationError(DeploymentFrameworkError):
    pass


class ArtifactError(DeploymentFrameworkError):
    """Artifact exists but cannot be used"""


class ArtifactNotFoundError(ArtifactError):
    pass


class ArtifactNotCompiledError(ArtifactError):
    pass


class NetworkConnectionError(DeploymentFrameworkError):
    pass


class DeploymentError(DeploymentFrameworkError):
    pass


class ContractNotDeployedError(DeploymentFrameworkError):
    pass


class TransactionRevertedError(DeploymentFrameworkError):
    def __init__(self, message, receipt=None):
        super().__init__(message)
        self.receipt = receipt
