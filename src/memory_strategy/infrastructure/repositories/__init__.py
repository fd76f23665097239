from .memory import InMemoryRecordRepository

__all__ = ["InMemoryRecordRepository"]
