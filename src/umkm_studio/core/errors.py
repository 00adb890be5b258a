"""Exception types shared across the studio."""


class CollaboratorError(Exception):
    """A generative-AI collaborator failed or returned unusable output.

    The message is shown to the user, so keep it readable.
    """


class ContentFormatError(CollaboratorError):
    """Text generation returned something other than the expected JSON object."""


class GatewayConfigurationError(Exception):
    """The transaction gateway is misconfigured for the current deployment."""


class GatewayUpstreamError(Exception):
    """The payment provider rejected or failed a transaction request."""
