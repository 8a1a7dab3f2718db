import uuid
from datetime import datetime, timezone

import pytest

from practice_planner.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from practice_planner.domain.entities import DogAssignment
from practice_planner.repositories import PracticeRepository
from tests.factories.planner_factories import create_dog


@pytest.fixture
def field(resource_pool, club_id):
    return resource_pool.create_resource(club_id, "Main field")


@pytest.fixture
def other_practice(scheduler, club_id):
    return scheduler.create(club_id, datetime(2030, 4, 1, tzinfo=timezone.utc))


class TestReorderSets:
    def test_round_trip(self, ordering, practice, field):
        s1 = ordering.create_set(practice.id, 1)
        s2 = ordering.create_set(practice.id, 2)

        updated = ordering.reorder_sets(practice.id, [(s1.id, 3), (s2.id, 1)])

        assert [(s.id, s.order) for s in updated] == [(s1.id, 3), (s2.id, 1)]
        assert [s.id for s in ordering.list_sets(practice.id)] == [s2.id, s1.id]

    def test_sets_of_other_practices_are_skipped(
        self, ordering, practice, other_practice, field
    ):
        mine = ordering.create_set(practice.id, 1)
        theirs = ordering.create_set(other_practice.id, 1)

        updated = ordering.reorder_sets(
            practice.id, [(theirs.id, 9), (str(uuid.uuid4()), 4), (mine.id, 5)]
        )

        assert [s.id for s in updated] == [mine.id]
        assert ordering.list_sets(other_practice.id)[0].order == 1

    def test_non_integer_order_writes_nothing(self, ordering, practice, field):
        s1 = ordering.create_set(practice.id, 1)
        s2 = ordering.create_set(practice.id, 2)

        with pytest.raises(ValidationError):
            ordering.reorder_sets(practice.id, [(s1.id, 7), (s2.id, "first")])

        assert [s.order for s in ordering.list_sets(practice.id)] == [1, 2]

    def test_malformed_pair(self, ordering, practice):
        with pytest.raises(ValidationError):
            ordering.reorder_sets(practice.id, [("only-one-value",)])

    def test_unknown_practice(self, ordering):
        with pytest.raises(NotFoundError):
            ordering.reorder_sets(str(uuid.uuid4()), [])

    def test_equal_orders_keep_insertion_order(self, ordering, practice, field):
        first = ordering.create_set(practice.id, 5)
        second = ordering.create_set(practice.id, 5)
        third = ordering.create_set(practice.id, 0)

        assert [s.id for s in ordering.list_sets(practice.id)] == [
            third.id,
            first.id,
            second.id,
        ]

    def test_gaps_and_negative_orders_are_allowed(self, ordering, practice, field):
        a = ordering.create_set(practice.id, 10)
        b = ordering.create_set(practice.id, -3)

        assert [s.id for s in ordering.list_sets(practice.id)] == [b.id, a.id]


class TestReorderSetDogs:
    def test_reorder_assigned_dogs(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(
            practice.id,
            1,
            dogs=[DogAssignment(dog_ids[0], 0), DogAssignment(dog_ids[1], 1)],
        )

        updated = ordering.reorder_set_dogs(
            practice_set.id, [(dog_ids[0], 4), (dog_ids[1], 2)]
        )

        assert [d.dog_id for d in updated] == [dog_ids[0], dog_ids[1]]
        assert [d.dog_id for d in ordering.list_set_dogs(practice_set.id)] == [
            dog_ids[1],
            dog_ids[0],
        ]

    def test_first_reorder_adds_club_dog(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(practice.id, 1)

        updated = ordering.reorder_set_dogs(practice_set.id, [(dog_ids[2], 3)])

        assert [(d.dog_id, d.order) for d in updated] == [(dog_ids[2], 3)]
        assert len(ordering.list_set_dogs(practice_set.id)) == 1

    def test_dogs_of_other_clubs_are_skipped(
        self, store, ordering, practice, field, other_club_id
    ):
        stranger = create_dog(store, other_club_id, "Stranger")
        practice_set = ordering.create_set(practice.id, 1)

        assert ordering.reorder_set_dogs(practice_set.id, [(stranger, 1)]) == []
        assert ordering.list_set_dogs(practice_set.id) == []

    def test_unknown_set(self, ordering, dog_ids):
        with pytest.raises(NotFoundError):
            ordering.reorder_set_dogs(str(uuid.uuid4()), [(dog_ids[0], 1)])

    def test_set_without_practice_is_internal_error(
        self, ordering, practice, field, dog_ids, monkeypatch
    ):
        practice_set = ordering.create_set(practice.id, 1)
        monkeypatch.setattr(PracticeRepository, "get", lambda *args: None)

        with pytest.raises(InternalError):
            ordering.reorder_set_dogs(practice_set.id, [(dog_ids[0], 1)])

    def test_bool_order_is_rejected(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(practice.id, 1, dogs=[DogAssignment(dog_ids[0])])

        with pytest.raises(ValidationError):
            ordering.reorder_set_dogs(practice_set.id, [(dog_ids[0], True)])


class TestCreateSet:
    def test_defaults_to_club_default_resource(self, ordering, practice, field):
        practice_set = ordering.create_set(practice.id, 1)

        assert practice_set.resource_id == field.id

    def test_explicit_resource(self, ordering, resource_pool, practice, field, club_id):
        hall = resource_pool.create_resource(club_id, "Hall")

        assert ordering.create_set(practice.id, 1, resource_id=hall.id).resource_id == hall.id

    def test_resource_of_another_club(
        self, ordering, resource_pool, practice, field, other_club_id
    ):
        barn = resource_pool.create_resource(other_club_id, "Barn")

        with pytest.raises(NotFoundError):
            ordering.create_set(practice.id, 1, resource_id=barn.id)

    def test_club_without_resources(self, ordering, practice):
        with pytest.raises(ConflictError):
            ordering.create_set(practice.id, 1)

    def test_dogs_with_lanes(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(
            practice.id,
            1,
            dogs=[DogAssignment(dog_ids[1], 1, "B"), DogAssignment(dog_ids[0], 0, "A")],
        )

        assert [(d.dog_id, d.lane) for d in ordering.list_set_dogs(practice_set.id)] == [
            (dog_ids[0], "A"),
            (dog_ids[1], "B"),
        ]
        assert len(practice_set.dogs) == 2

    def test_unknown_dog_rolls_back_the_set(self, ordering, practice, field, dog_ids):
        with pytest.raises(NotFoundError):
            ordering.create_set(
                practice.id,
                1,
                dogs=[DogAssignment(dog_ids[0]), DogAssignment(str(uuid.uuid4()))],
            )

        assert ordering.list_sets(practice.id) == []

    def test_duplicate_dog_is_rejected(self, ordering, practice, field, dog_ids):
        with pytest.raises(ValidationError):
            ordering.create_set(
                practice.id, 1, dogs=[DogAssignment(dog_ids[0]), DogAssignment(dog_ids[0])]
            )


class TestAssignAndDelete:
    def test_assign_replaces_dogs(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(
            practice.id, 1, dogs=[DogAssignment(dog_ids[0]), DogAssignment(dog_ids[1])]
        )

        updated = ordering.assign_dogs(practice_set.id, [DogAssignment(dog_ids[2], 0, "C")])

        assert [(d.dog_id, d.lane) for d in updated.dogs] == [(dog_ids[2], "C")]

    def test_failed_assign_keeps_previous_dogs(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(practice.id, 1, dogs=[DogAssignment(dog_ids[0])])

        with pytest.raises(NotFoundError):
            ordering.assign_dogs(practice_set.id, [DogAssignment(str(uuid.uuid4()))])

        assert [d.dog_id for d in ordering.list_set_dogs(practice_set.id)] == [dog_ids[0]]

    def test_delete_set(self, ordering, practice, field, dog_ids):
        practice_set = ordering.create_set(practice.id, 1, dogs=[DogAssignment(dog_ids[0])])

        ordering.delete_set(practice_set.id, practice.id)

        assert ordering.list_sets(practice.id) == []
        with pytest.raises(NotFoundError):
            ordering.list_set_dogs(practice_set.id)

    def test_delete_set_of_other_practice(self, ordering, practice, other_practice, field):
        theirs = ordering.create_set(other_practice.id, 1)

        with pytest.raises(NotFoundError):
            ordering.delete_set(theirs.id, practice.id)

    def test_assign_through_other_practice_is_not_found(
        self, ordering, practice, other_practice, field, dog_ids
    ):
        theirs = ordering.create_set(other_practice.id, 1, dogs=[DogAssignment(dog_ids[0])])

        with pytest.raises(NotFoundError):
            ordering.assign_dogs(theirs.id, [DogAssignment(dog_ids[1])], practice_id=practice.id)
        assert [d.dog_id for d in ordering.list_set_dogs(theirs.id)] == [dog_ids[0]]

    def test_reorder_dogs_through_other_practice_is_not_found(
        self, ordering, practice, other_practice, field, dog_ids
    ):
        theirs = ordering.create_set(other_practice.id, 1)

        with pytest.raises(NotFoundError):
            ordering.reorder_set_dogs(theirs.id, [(dog_ids[0], 0)], practice_id=practice.id)
        assert ordering.list_set_dogs(theirs.id) == []

    def test_list_sets_includes_dogs(self, ordering, practice, field, dog_ids):
        ordering.create_set(practice.id, 1, dogs=[DogAssignment(dog_ids[0])])

        listed = ordering.list_sets(practice.id)

        assert [d.dog_id for d in listed[0].dogs] == [dog_ids[0]]
