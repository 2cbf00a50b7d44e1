"""Identity semantics shared by every entity type."""

from __future__ import annotations

from uuid import uuid4

from hypothesis import given
from hypothesis import strategies as st

from backend.buq.domain.buq import (
    BottomUpQuantification,
    BottomUpQuantificationLineItem,
    BottomUpQuantificationStatusChange,
)
from backend.buq.domain.remark import Remark

ENTITY_CLASSES = [
    Remark,
    BottomUpQuantification,
    BottomUpQuantificationLineItem,
    BottomUpQuantificationStatusChange,
]
ENTITY_TYPES = st.sampled_from(ENTITY_CLASSES)
DISTINCT_TYPE_PAIRS = st.permutations(ENTITY_CLASSES).map(lambda classes: classes[:2])


@given(entity_type=ENTITY_TYPES, entity_id=st.uuids())
def test_entities_with_same_id_are_equal(entity_type, entity_id):
    left = entity_type(id=entity_id)
    right = entity_type(id=entity_id)

    assert left == right
    assert hash(left) == hash(right)


@given(entity_type=ENTITY_TYPES, left_id=st.uuids(), right_id=st.uuids())
def test_entities_with_different_ids_are_not_equal(entity_type, left_id, right_id):
    left = entity_type(id=left_id)
    right = entity_type(id=right_id)

    assert (left == right) == (left_id == right_id)


@given(pair=DISTINCT_TYPE_PAIRS, entity_id=st.uuids())
def test_entities_of_different_types_sharing_an_id_are_not_equal(pair, entity_id):
    left_type, right_type = pair
    left = left_type(id=entity_id)
    right = right_type(id=entity_id)

    assert left != right
    assert right != left
    assert len({left, right}) == 2


@given(entity_type=ENTITY_TYPES)
def test_entity_without_id_equals_only_itself(entity_type):
    entity = entity_type()
    twin = entity_type()

    assert entity == entity
    assert entity != twin
    assert entity != entity_type(id=uuid4())
    assert len({entity, twin}) == 2


@given(entity_id=st.uuids(), name=st.text(), other_name=st.text())
def test_equality_ignores_business_fields(entity_id, name, other_name):
    assert Remark(id=entity_id, name=name) == Remark(id=entity_id, name=other_name)


def test_entity_is_never_equal_to_foreign_objects():
    remark_id = uuid4()
    remark = Remark(id=remark_id, name="Stockout")

    assert remark != remark_id
    assert remark != {"id": remark_id}
    assert remark != None  # noqa: E711


def test_new_entities_start_at_version_zero():
    assert Remark().version == 0
    assert BottomUpQuantification().version == 0


def test_repr_lists_attributes():
    text = repr(Remark(name="Stockout"))

    assert text.startswith("Remark(")
    assert "name='Stockout'" in text
