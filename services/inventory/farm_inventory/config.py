"""
Configuration for the Farm Inventory service.

Values are read from environment variables, after loading a local .env file
if one exists.
"""
import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_MONGODB_URI = "mongodb://localhost:27017/farm-inventory"

_CREDENTIALS = re.compile(r"//([^:/@]+):([^@]+)@")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the service.

    Attributes:
        port (int): Port the HTTP server listens on
        host (str): Interface the HTTP server binds to
        environment (str): Deployment environment name (informational only)
        mongodb_uri (str): MongoDB connection string
        server_selection_timeout_ms (int): Upper bound for the startup connection attempt
        socket_timeout_ms (int): Socket timeout for store operations
        log_level (str): Logging level name
    """
    port: int = 5000
    host: str = "0.0.0.0"
    environment: str = "development"
    mongodb_uri: str = DEFAULT_MONGODB_URI
    server_selection_timeout_ms: int = 5000
    socket_timeout_ms: int = 45000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            port=int(os.getenv("PORT", "5000")),
            host=os.getenv("HOST", "0.0.0.0"),
            environment=os.getenv("ENVIRONMENT", os.getenv("NODE_ENV", "development")),
            mongodb_uri=os.getenv("MONGODB_URI", DEFAULT_MONGODB_URI),
            server_selection_timeout_ms=int(os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000")),
            socket_timeout_ms=int(os.getenv("MONGODB_SOCKET_TIMEOUT_MS", "45000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def redact_uri(uri: str) -> str:
    """
    Hide the password of a connection string so it can be logged.

    Example:
        redact_uri("mongodb://farmer:secret@db:27017/farm")
        -> "mongodb://farmer:****@db:27017/farm"
    """
    return _CREDENTIALS.sub(r"//\1:****@", uri)
