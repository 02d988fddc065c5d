"""Shared exceptions module."""

from typing import Optional


class OAuthBridgeException(Exception):
    """Base exception for oauthbridge services."""

    pass


class OAuthTransportError(OAuthBridgeException):
    """Exception raised when an outbound call fails below the HTTP layer.

    Covers DNS resolution, connection, TLS and timeout failures. A response
    with a non-2xx status is not a transport error.
    """

    def __init__(self, url: str, message: Optional[str] = "Transport failure"):
        """Create a new OAuthTransportError instance.

        Args:
        ----
            url (str): The URL that could not be reached.
            message (str, optional): The error message. Has default message.

        """
        self.url = url
        self.message = message
        super().__init__(f"{url}: {message}")


class ResponseDecodeError(OAuthBridgeException):
    """Exception raised when a provider response body cannot be decoded."""

    def __init__(self, message: Optional[str] = "Could not decode provider response"):
        """Create a new ResponseDecodeError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class InvalidHandshakeTransition(OAuthBridgeException):
    """Exception raised when a handshake operation is called from the wrong state."""

    def __init__(self, operation: str, state: str):
        """Create a new InvalidHandshakeTransition instance.

        Args:
        ----
            operation (str): The operation that was attempted.
            state (str): The state the handshake was in.

        """
        self.operation = operation
        self.state = state
        self.message = f"Cannot {operation} a handshake in state '{state}'"
        super().__init__(self.message)


class UnknownProviderException(OAuthBridgeException):
    """Exception raised when a flow is requested for a provider that is not configured."""

    def __init__(self, provider: str):
        """Create a new UnknownProviderException instance.

        Args:
        ----
            provider (str): The provider short name that was requested.

        """
        self.provider = provider
        self.message = f"OAuth1 provider not configured: {provider}"
        super().__init__(self.message)
