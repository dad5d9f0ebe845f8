from __future__ import annotations

import pytest

from registry.models.family_relationship import FamilyRelationship
from registry.services import family
from registry.services.errors import DuplicateEdge, InvalidOperation, NotFound


def _edges(db_session) -> set[tuple[int, int, str]]:
    return {
        (edge.member_id, edge.related_member_id, edge.relationship_type)
        for edge in db_session.query(FamilyRelationship).all()
    }


def test_spouse_link_creates_both_directions(db_session, make_member):
    husband = make_member("Paulo Henrique")
    wife = make_member("Raquel Henrique", sex="Female")

    added = family.add_relationship(db_session, husband.id, wife.id, "Spouse")
    db_session.commit()

    assert added.mirror is not None
    assert _edges(db_session) == {
        (husband.id, wife.id, "Spouse"),
        (wife.id, husband.id, "Spouse"),
    }


def test_repeated_link_is_rejected_without_changing_the_graph(db_session, make_member):
    husband = make_member("Paulo Henrique")
    wife = make_member("Raquel Henrique", sex="Female")
    family.add_relationship(db_session, husband.id, wife.id, "Spouse")
    db_session.commit()

    with pytest.raises(DuplicateEdge):
        family.add_relationship(db_session, husband.id, wife.id, "Spouse")
    db_session.rollback()

    assert len(_edges(db_session)) == 2


def test_father_link_mirrors_to_child(db_session, make_member):
    son = make_member("Tiago Moreira")
    father = make_member("Roberto Moreira")

    family.add_relationship(db_session, son.id, father.id, "Father")
    db_session.commit()

    assert _edges(db_session) == {
        (son.id, father.id, "Father"),
        (father.id, son.id, "Child"),
    }


def test_child_link_mirrors_by_parent_sex(db_session, make_member):
    mother = make_member("Sara Pires", sex="Female")
    father = make_member("Vitor Pires")
    daughter = make_member("Yasmin Pires", sex="Female")

    family.add_relationship(db_session, mother.id, daughter.id, "Child")
    family.add_relationship(db_session, father.id, daughter.id, "Child")
    db_session.commit()

    edges = _edges(db_session)
    assert (daughter.id, mother.id, "Mother") in edges
    assert (daughter.id, father.id, "Father") in edges


def test_sibling_link_is_symmetric(db_session, make_member):
    first = make_member("Bruno Castro")
    second = make_member("Clara Castro", sex="Female")

    family.add_relationship(db_session, first.id, second.id, "Sibling")
    db_session.commit()

    assert (second.id, first.id, "Sibling") in _edges(db_session)


def test_existing_mirror_is_not_duplicated(db_session, make_member):
    son = make_member("Tiago Moreira")
    father = make_member("Roberto Moreira")
    family.import_relationship_edges(db_session, [(father.id, son.id, "Child")])
    db_session.commit()

    added = family.add_relationship(db_session, son.id, father.id, "Father")
    db_session.commit()

    assert added.mirror is None
    assert len(_edges(db_session)) == 2


def test_self_link_is_rejected(db_session, sample_member):
    with pytest.raises(InvalidOperation):
        family.add_relationship(db_session, sample_member.id, sample_member.id, "Sibling")
    assert _edges(db_session) == set()


def test_missing_member_is_not_found(db_session, sample_member):
    with pytest.raises(NotFound):
        family.add_relationship(db_session, sample_member.id, 9999, "Spouse")
    with pytest.raises(NotFound):
        family.add_relationship(db_session, 9999, sample_member.id, "Spouse")


def test_unknown_type_is_rejected(db_session, make_member):
    first = make_member("Bruno Castro")
    second = make_member("Clara Castro", sex="Female")
    with pytest.raises(InvalidOperation):
        family.add_relationship(db_session, first.id, second.id, "Cousin")


def test_remove_deletes_only_the_given_edge(db_session, make_member):
    husband = make_member("Paulo Henrique")
    wife = make_member("Raquel Henrique", sex="Female")
    added = family.add_relationship(db_session, husband.id, wife.id, "Spouse")
    db_session.commit()

    family.remove_relationship(db_session, added.edge.id)
    db_session.commit()

    assert _edges(db_session) == {(wife.id, husband.id, "Spouse")}

    with pytest.raises(NotFound):
        family.remove_relationship(db_session, added.edge.id)


def test_import_writes_edges_without_mirrors(db_session, make_member):
    son = make_member("Tiago Moreira")
    father = make_member("Roberto Moreira")

    created = family.import_relationship_edges(db_session, [(son.id, father.id, "Father")])
    db_session.commit()

    assert len(created) == 1
    assert _edges(db_session) == {(son.id, father.id, "Father")}


def test_get_family_orders_parents_first(db_session, make_member):
    member = make_member("Otávio Barros")
    child = make_member("Zeca Barros")
    sibling_b = make_member("Bianca Barros", sex="Female")
    sibling_a = make_member("Alice Barros", sex="Female")
    spouse = make_member("Marta Barros", sex="Female")
    mother = make_member("Lúcia Barros", sex="Female")
    father = make_member("Jorge Barros")

    for related, relationship_type in (
        (child, "Child"),
        (sibling_b, "Sibling"),
        (sibling_a, "Sibling"),
        (spouse, "Spouse"),
        (mother, "Mother"),
        (father, "Father"),
    ):
        family.add_relationship(db_session, member.id, related.id, relationship_type)
    db_session.commit()

    entries = family.get_family(db_session, member.id)
    assert [(entry.relationship_type, entry.member.name) for entry in entries] == [
        ("Father", "Jorge Barros"),
        ("Mother", "Lúcia Barros"),
        ("Spouse", "Marta Barros"),
        ("Sibling", "Alice Barros"),
        ("Sibling", "Bianca Barros"),
        ("Child", "Zeca Barros"),
    ]


def test_deleting_a_member_cascades_to_edges(db_session, make_member):
    husband = make_member("Paulo Henrique")
    wife = make_member("Raquel Henrique", sex="Female")
    family.add_relationship(db_session, husband.id, wife.id, "Spouse")
    db_session.commit()

    db_session.delete(wife)
    db_session.commit()

    assert _edges(db_session) == set()


def test_failed_mirror_insert_rolls_back_the_requested_edge(db_session, make_member, monkeypatch):
    husband = make_member("Paulo Henrique")
    wife = make_member("Raquel Henrique", sex="Female")
    family.import_relationship_edges(db_session, [(wife.id, husband.id, "Spouse")])
    db_session.commit()

    real_edge_exists = family._edge_exists

    def stale_edge_exists(db, member_id, related_member_id, relationship_type):
        # a concurrent writer added the mirror after this lookup ran
        if (member_id, related_member_id) == (wife.id, husband.id):
            return False
        return real_edge_exists(db, member_id, related_member_id, relationship_type)

    monkeypatch.setattr(family, "_edge_exists", stale_edge_exists)

    with pytest.raises(DuplicateEdge):
        family.add_relationship(db_session, husband.id, wife.id, "Spouse")

    assert _edges(db_session) == {(wife.id, husband.id, "Spouse")}
