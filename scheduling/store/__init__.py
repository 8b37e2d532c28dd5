from scheduling.store.base import RecordStore
from scheduling.store.memory import InMemoryRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore"]
