from .storage_entry import StorageEntry
