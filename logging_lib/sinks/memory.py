"""In-memory sink useful for debugging and tests."""

from __future__ import annotations

import copy
from typing import List, Mapping


class InMemorySink:
    name = "memory"

    def __init__(self) -> None:
        self.records: List[Mapping[str, object]] = []

    def emit(self, record: Mapping[str, object]) -> None:
        self.records.append(copy.deepcopy(dict(record)))

    def messages(self) -> List[object]:
        return [record.get("message") for record in self.records]

    def clear(self) -> None:
        self.records.clear()
