class OrchestrationError(Exception):
    """Base class for everything that aborts a deployment run."""


class ConfigurationError(OrchestrationError):
    def __init__(self, message, setting=None):
        super().__init__(message)
        self.setting = setting


class ConnectivityError(OrchestrationError):
    def __init__(self, message, endpoint=None):
        super().__init__(message)
        self.endpoint = endpoint


class SignerError(OrchestrationError):
    pass


class DeploymentError(OrchestrationError):
    pass


class ArtifactError(OrchestrationError):
    pass
