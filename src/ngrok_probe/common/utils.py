"""Utility functions for the ngrok probe."""

from urllib.parse import urlsplit

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535

INSPECTION_PATH = "/api/tunnels"
SECURE_SCHEME = "https"


def validate_port(port: int, port_name: str = "Port") -> None:
    """Validate port number range.

    Args:
        port: Port number to validate
        port_name: Name of the port for error messages

    Raises:
        ValueError: If port is not in valid range (1-65535)
    """
    if isinstance(port, bool) or not isinstance(port, int) or not (MIN_PORT <= port <= MAX_PORT):
        raise ValueError(f"{port_name} must be between {MIN_PORT} and {MAX_PORT}")


def validate_non_empty_string(value: str, field_name: str) -> str:
    """Validate that a string is not empty or only whitespace.

    Args:
        value: String value to validate
        field_name: Name of the field for error messages

    Returns:
        Stripped string value

    Raises:
        ValueError: If string is empty or only whitespace
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()


def build_inspection_url(host: str, port: int) -> str:
    """Build the tunnels listing URL of an inspection endpoint.

    Args:
        host: Host the inspection endpoint is reachable at
        port: Inspection endpoint port

    Returns:
        URL of the form ``http://{host}:{port}/api/tunnels``
    """
    host = validate_non_empty_string(host, "Host")
    validate_port(port, "Inspection port")
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{port}{INSPECTION_PATH}"


def is_secure_url(url: str) -> bool:
    """Return True when the URL uses the https scheme."""
    return urlsplit(url.strip()).scheme.lower() == SECURE_SCHEME
