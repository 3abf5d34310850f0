from chat_auth_store.core.stores import Stores, create_stores
from chat_auth_store.exceptions import ConflictError, StorageError, StorageFaultError

__all__ = [
    "ConflictError",
    "StorageError",
    "StorageFaultError",
    "Stores",
    "create_stores",
]
