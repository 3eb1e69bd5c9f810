class C4000XGClientException(Exception):
    """Base exception for C4000XG client errors."""
    pass


class TransportException(C4000XGClientException):
    """The modem could not be reached or answered with an HTTP error."""
    pass


class AuthenticationException(C4000XGClientException):
    """The login request could not be sent."""
    pass


class DecodeException(C4000XGClientException):
    """The response body is not JSON of the expected shape."""
    pass


class ConfigException(C4000XGClientException):
    """Required startup configuration is missing or invalid."""
    pass
