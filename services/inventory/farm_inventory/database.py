"""
Database connection management for the Farm Inventory service.

This module owns the MongoDB client, tracks the live state of the connection
and exposes FastAPI dependencies that hand the connection to route handlers.
The service keeps serving non-data endpoints when MongoDB is unreachable
("fallback mode"), so connecting never raises.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from fastapi import Request
from pymongo import MongoClient, monitoring
from pymongo.collection import Collection

from . import models
from .config import Settings, redact_uri

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERRORED = "errored"


class ConnectionTracker(monitoring.ServerHeartbeatListener):
    """
    Current state of the link to MongoDB.

    Registered with the driver as a heartbeat listener, so the state follows the
    driver's own view of the servers. Heartbeat health is kept per server
    address: the link is errored only once no known server answers. Heartbeats
    run on a driver thread; reads here are plain attribute reads and never block.
    """

    def __init__(self):
        self._state = ConnectionState.DISCONNECTED
        self._healthy = {}

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    def mark_connecting(self):
        self._state = ConnectionState.CONNECTING

    def mark_connected(self):
        if self._state != ConnectionState.CONNECTED:
            logger.info("Connected to MongoDB")
        self._state = ConnectionState.CONNECTED

    def mark_errored(self, reason: str):
        if self._state != ConnectionState.ERRORED:
            logger.error(f"MongoDB connection error: {reason}")
        self._state = ConnectionState.ERRORED

    def mark_disconnected(self):
        self._healthy.clear()
        if self._state != ConnectionState.DISCONNECTED:
            logger.info("Disconnected from MongoDB")
        self._state = ConnectionState.DISCONNECTED

    # pymongo heartbeat callbacks

    def started(self, event):
        pass

    def succeeded(self, event):
        self._healthy[event.connection_id] = True
        self.mark_connected()

    def failed(self, event):
        self._healthy[event.connection_id] = False
        if not any(self._healthy.values()):
            self.mark_errored(str(event.reply))


class Database:
    """
    MongoDB connection owned by one application instance.

    Attributes:
        settings (Settings): Connection settings
        tracker (ConnectionTracker): Live connection state
        client (MongoClient): Driver client, None until connected
        name (str): Name of the database holding the items collection
    """

    def __init__(self, settings: Settings, client_factory: Callable[..., MongoClient] = MongoClient):
        self.settings = settings
        self.tracker = ConnectionTracker()
        self.client: Optional[MongoClient] = None
        self.name = models.DEFAULT_DATABASE
        self._client_factory = client_factory

    @property
    def items(self) -> Collection:
        return self.client[self.name][models.ITEMS_COLLECTION]

    def connect(self) -> None:
        """
        Make a single, time-bounded attempt to connect to MongoDB.

        Failures are logged and swallowed: the tracker is left in the errored
        state and the caller carries on without a database.
        """
        uri = self.settings.mongodb_uri
        logger.info("Attempting to connect to MongoDB...")
        logger.info(f"MongoDB URI: {redact_uri(uri)}")
        self.tracker.mark_connecting()

        client = None
        try:
            client = self._client_factory(
                uri,
                serverSelectionTimeoutMS=self.settings.server_selection_timeout_ms,
                socketTimeoutMS=self.settings.socket_timeout_ms,
                tz_aware=True,
                event_listeners=[self.tracker],
            )
            client.admin.command("ping")
            self.name = client.get_default_database(default=models.DEFAULT_DATABASE).name
        except Exception as e:
            logger.warning(f"MongoDB connection failed: {redact_uri(str(e))}")
            logger.warning("The server will start without database connection.")
            logger.warning("Database-dependent features will not be available.")
            logger.warning("Please check your MONGODB_URI environment variable.")
            if client is not None:
                client.close()
            self.tracker.mark_errored(redact_uri(str(e)))
            return

        self.client = client
        self.tracker.mark_connected()
        logger.info(f"Database: {self.name}")

    def close(self) -> bool:
        """
        Close the MongoDB client.

        Returns:
            True if the connection was closed (or never opened), False if closing failed
        """
        if self.client is None:
            self.tracker.mark_disconnected()
            return True
        try:
            self.client.close()
        except Exception:
            logger.exception("Error while closing MongoDB connection")
            return False
        self.client = None
        self.tracker.mark_disconnected()
        logger.info("MongoDB connection closed")
        return True


def get_database(request: Request) -> Database:
    """
    Dependency function that provides the application's database.

    Usage:
        Use as a FastAPI dependency to inject the database into route handlers.
    """
    return request.app.state.database


def get_items_collection(request: Request) -> Collection:
    """Dependency function that provides the inventory items collection."""
    return get_database(request).items
