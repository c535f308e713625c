import logging

from .errors import ConflictError, CorruptStoreError, DataServiceError, TransportError
from .local import LocalStore
from .notices import Notifier
from .remote import RemoteStore
from .service import DataService
from .storage import JsonFileStore, MemoryStore, StoreFacade

logger = logging.getLogger(__name__)

__all__ = [
    'ConflictError',
    'CorruptStoreError',
    'DataService',
    'DataServiceError',
    'JsonFileStore',
    'LocalStore',
    'MemoryStore',
    'Notifier',
    'RemoteStore',
    'StoreFacade',
    'TransportError',
    'build_data_service',
]


def build_data_service(config, storage=None, notifier=None, probe=None):
    """Wire a DataService from a config class.

    Args:
        config: A class from ``bioalgos.config.config_map``.
        storage: Optional StoreFacade; defaults to a JsonFileStore at
                 ``config.LOCAL_STORE_PATH``.
        notifier: Optional shared Notifier.
        probe: Override ``config.API_PROBE_ON_START``.

    Returns:
        A DataService, already probed unless probing is disabled.
    """
    if storage is None:
        storage = StoreFacade(JsonFileStore(config.LOCAL_STORE_PATH))
    remote = RemoteStore(
        config.BIOALGOS_API_URL,
        timeout=config.API_REQUEST_TIMEOUT,
        probe_timeout=config.API_PROBE_TIMEOUT,
    )
    if probe is None:
        probe = config.API_PROBE_ON_START
    logger.debug(f"Building data service for {config.BIOALGOS_API_URL}")
    return DataService(remote, LocalStore(storage), notifier=notifier, probe=probe)
