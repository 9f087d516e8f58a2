from collections import OrderedDict
from typing import Dict, Iterator, List, Optional

from veo_studio.models.video import GenerationRecord, RecordStatus


class RecordBook:
    """Generation records for one session, keyed by identifier.

    Newest records come first when iterating. Records are only ever added or
    moved out of ``pending``; nothing is removed for the life of the session.
    """

    def __init__(self):
        self._records: "OrderedDict[str, GenerationRecord]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[GenerationRecord]:
        return iter(self._records.values())

    def get(self, identifier: str) -> Optional[GenerationRecord]:
        return self._records.get(identifier)

    def add(self, prompt: str) -> GenerationRecord:
        record = GenerationRecord(prompt=prompt)
        self._records[record.identifier] = record
        self._records.move_to_end(record.identifier, last=False)
        return record

    def _settle(self, identifier: str, **changes) -> Optional[GenerationRecord]:
        record = self._records.get(identifier)
        if record is None or record.status is not RecordStatus.PENDING:
            return record
        updated = record.model_copy(update=changes)
        self._records[identifier] = updated
        return updated

    def resolve(self, identifier: str, video_url: str) -> Optional[GenerationRecord]:
        return self._settle(identifier, status=RecordStatus.COMPLETED, video_url=video_url)

    def fail(self, identifier: str, error: str) -> Optional[GenerationRecord]:
        return self._settle(identifier, status=RecordStatus.FAILED, error=error)

    @property
    def records(self) -> List[GenerationRecord]:
        return list(self._records.values())

    @property
    def is_generating(self) -> bool:
        return any(r.status is RecordStatus.PENDING for r in self._records.values())

    def counts(self) -> Dict[RecordStatus, int]:
        totals = {s: 0 for s in RecordStatus}
        for record in self._records.values():
            totals[record.status] += 1
        return totals
