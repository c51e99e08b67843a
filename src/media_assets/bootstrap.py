"""Process-level wiring of the asset manager and its store client."""

import threading

from aws_lambda_powertools import Logger

from media_assets.config import StorageSettings
from media_assets.infrastructure.adapters.s3_adapter import S3Adapter
from media_assets.infrastructure.aws.s3_object_store import S3ObjectStore
from media_assets.models.errors import StorageUnavailableError
from media_assets.services.lifecycle import AssetLifecycleManager
from media_assets.services.urls import UrlResolver

logger = Logger(UTC=True)


def build_asset_manager(
    settings: StorageSettings,
    adapter: S3Adapter | None = None,
) -> AssetLifecycleManager:
    """Wire an S3-backed manager from explicit settings."""
    store = S3ObjectStore(
        adapter or S3Adapter(settings),
        operation_timeout=settings.operation_timeout,
    )
    return AssetLifecycleManager(store, UrlResolver.from_settings(settings))


class AssetManagerProvider:
    """Creates the process-wide manager exactly once and tears it down.

    Intended to be initialised at process start (`init`) and closed at
    shutdown (`close`). `get` raises StorageUnavailableError instead of
    handing out a half-configured client.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._manager: AssetLifecycleManager | None = None
        self._store: S3ObjectStore | None = None

    @property
    def initialized(self) -> bool:
        return self._manager is not None

    def init(self, settings: StorageSettings | None = None) -> AssetLifecycleManager:
        """Build the manager on first call; later calls return the same one.

        Raises:
            StorageUnavailableError: If settings are missing from the environment
        """
        with self._lock:
            if self._manager is None:
                resolved = settings or StorageSettings.from_env()
                manager = build_asset_manager(resolved)
                self._manager = manager
                self._store = manager.store if isinstance(manager.store, S3ObjectStore) else None
                logger.info(
                    "Object store client initialized",
                    extra={"bucket": resolved.bucket_name, "endpoint": resolved.api_endpoint},
                )
            return self._manager

    def get(self) -> AssetLifecycleManager:
        """Return the initialised manager.

        Raises:
            StorageUnavailableError: If `init` has not succeeded
        """
        manager = self._manager
        if manager is None:
            raise StorageUnavailableError(message="Image storage is not available")
        return manager

    def close(self) -> None:
        """Release the store client; a later `init` builds a fresh one."""
        with self._lock:
            if self._store is not None:
                self._store.close()
                logger.info("Object store client closed")
            self._manager = None
            self._store = None
