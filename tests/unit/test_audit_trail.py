"""Field-level diffing and querying of the audit trail."""

from __future__ import annotations

from uuid import uuid4

from backend.buq.domain.audit import (
    AuditTrail,
    InMemoryAuditLogRepository,
    export_snapshot,
    to_jsonable,
)
from backend.buq.domain.buq import BottomUpQuantificationStatus
from backend.buq.domain.common import PageSpec
from backend.buq.domain.remark import Remark


def test_record_writes_one_entry_per_changed_property_under_one_commit():
    repository = InMemoryAuditLogRepository()
    trail = AuditTrail(repository)
    entity_id = uuid4()

    entries = trail.record(
        entity_type="remark",
        entity_id=entity_id,
        before={"id": "a", "version": 0, "name": "old", "description": "same"},
        after={"id": "b", "version": 1, "name": "new", "description": "same"},
        author="alice",
    )

    assert [entry.property_name for entry in entries] == ["name"]
    assert (entries[0].left, entries[0].right) == ("old", "new")
    assert repository.entries == entries


def test_record_without_changes_writes_nothing():
    repository = InMemoryAuditLogRepository()

    entries = AuditTrail(repository).record(
        entity_type="remark",
        entity_id=uuid4(),
        before={"name": "x"},
        after={"name": "x"},
        author="alice",
    )

    assert entries == []
    assert repository.entries == []


def test_entries_of_one_commit_share_commit_id():
    trail = AuditTrail()

    entries = trail.record(
        entity_type="remark",
        entity_id=uuid4(),
        before=None,
        after={"name": "a", "description": "b"},
        author="alice",
    )

    assert len({entry.commit_id for entry in entries}) == 1
    assert len(entries) == 2


def test_search_is_scoped_to_entity_and_newest_first():
    trail = AuditTrail()
    entity_id, other_id = uuid4(), uuid4()
    for target, before, after, author in (
        (entity_id, None, {"name": "a"}, "alice"),
        (entity_id, {"name": "a"}, {"name": "b"}, "bob"),
        (other_id, None, {"name": "z"}, "bob"),
    ):
        trail.record(
            entity_type="remark",
            entity_id=target,
            before=before,
            after=after,
            author=author,
        )

    page = trail.search(
        entity_type="remark",
        entity_id=entity_id,
        author=None,
        property_name=None,
        page_spec=PageSpec(),
    )

    assert [entry.right for entry in page.content] == ["b", "a"]


def test_snapshot_is_json_compatible():
    remark = Remark(id=uuid4(), name="Stockout")

    snapshot = export_snapshot(remark)

    assert snapshot == {
        "id": str(remark.id),
        "version": 0,
        "name": "Stockout",
        "description": None,
    }
    assert to_jsonable([BottomUpQuantificationStatus.DRAFT]) == ["DRAFT"]
