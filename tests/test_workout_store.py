"""Tests for the ordered workout store and its serialized form."""
import copy
import math

import pytest

from workout_map.exceptions import CorruptPersistedData, InvalidWorkoutInput, NotFound
from workout_map.models.workout import WorkoutKind
from workout_map.services.workout_store import WorkoutStore

LONDON = (51.5, -0.12)


def add_run(store, distance=5, duration=30, cadence=170, coordinates=LONDON):
    return store.add(WorkoutKind.RUNNING, distance, duration, coordinates, cadence)


def add_ride(store, distance=20, duration=60, elevation=150, coordinates=LONDON):
    return store.add(WorkoutKind.CYCLING, distance, duration, coordinates, elevation)


class TestAdd:
    def test_running_scenario(self, store):
        workout = add_run(store)

        assert workout.kind is WorkoutKind.RUNNING
        assert workout.pace_min_per_km == 6
        assert workout.cadence_spm == 170
        assert workout.description == "Running on October 18"
        assert workout.coordinates == LONDON
        assert store.all() == (workout,)

    def test_cycling_scenario(self, store):
        workout = add_ride(store)

        assert workout.kind is WorkoutKind.CYCLING
        assert workout.speed_km_per_h == 20
        assert workout.elevation_gain_m == 150

    def test_kind_may_be_given_as_text(self, store):
        assert store.add("cycling", 10, 30, LONDON, 0).kind is WorkoutKind.CYCLING

    def test_preserves_insertion_order(self, store):
        first = add_run(store)
        second = add_ride(store)
        third = add_run(store, distance=10)

        assert [w.id for w in store.all()] == [first.id, second.id, third.id]
        assert list(store) == list(store.all())
        assert len(store) == 3

    @pytest.mark.parametrize(
        "distance,duration,cadence",
        [(0, 30, 170), (5, -1, 170), (5, 30, 0), (math.nan, 30, 170), (5, math.inf, 170), ("5", 30, 170)],
    )
    def test_invalid_running_input_leaves_store_unchanged(self, store, distance, duration, cadence):
        add_run(store)

        with pytest.raises(InvalidWorkoutInput):
            add_run(store, distance=distance, duration=duration, cadence=cadence)

        assert len(store) == 1

    def test_invalid_cycling_elevation(self, store):
        with pytest.raises(InvalidWorkoutInput):
            add_ride(store, elevation=math.nan)
        assert len(store) == 0

    def test_negative_elevation_is_allowed(self, store):
        assert add_ride(store, elevation=-40).elevation_gain_m == -40

    def test_unknown_kind(self, store):
        with pytest.raises(InvalidWorkoutInput):
            store.add("swimming", 1, 10, LONDON, 0)
        assert len(store) == 0

    def test_ids_are_unique_even_when_factory_repeats(self, fixed_clock):
        ids = iter(["dup", "dup", "fresh"])
        store = WorkoutStore(clock=fixed_clock, id_factory=lambda: next(ids))

        first = add_run(store)
        second = add_run(store)

        assert first.id == "dup"
        assert second.id == "fresh"

    def test_default_ids_are_unique(self):
        store = WorkoutStore()
        ids = {add_run(store).id for _ in range(50)}
        assert len(ids) == 50


class TestLookup:
    def test_find_by_id(self, store):
        add_run(store)
        ride = add_ride(store)
        assert store.find_by_id(ride.id) is ride

    def test_find_unknown_id_raises(self, store):
        add_run(store)
        with pytest.raises(NotFound):
            store.find_by_id("never-added")

    def test_all_is_read_only(self, store):
        add_run(store)
        snapshot = store.all()
        assert isinstance(snapshot, tuple)
        add_ride(store)
        assert len(snapshot) == 1

    def test_discard_undoes_add(self, store):
        kept = add_run(store)
        dropped = add_ride(store)

        store.discard(dropped.id)

        assert store.all() == (kept,)
        with pytest.raises(NotFound):
            store.find_by_id(dropped.id)

    def test_clear(self, store):
        workout = add_run(store)
        store.clear()
        assert len(store) == 0
        with pytest.raises(NotFound):
            store.find_by_id(workout.id)


class TestSerialize:
    def test_record_layout(self, store):
        add_run(store)
        add_ride(store)

        run, ride = store.serialize()

        assert run == {
            "id": "w1",
            "createdAt": "2026-10-18T09:30:00Z",
            "kind": "running",
            "distanceKm": 5.0,
            "durationMin": 30.0,
            "coordinates": [51.5, -0.12],
            "description": "Running on October 18",
            "cadenceSpm": 170.0,
            "paceMinPerKm": 6.0,
        }
        assert ride["kind"] == "cycling"
        assert ride["elevationGainM"] == 150.0
        assert ride["speedKmPerH"] == 20.0
        assert "cadenceSpm" not in ride

    def test_round_trip(self, store, fixed_clock):
        add_run(store)
        add_ride(store, elevation=-12.5)
        add_run(store, distance=3.7, duration=21.4, coordinates=(40.4168, -3.7038))

        restored = WorkoutStore(clock=fixed_clock)
        restored.deserialize(store.serialize())

        assert restored.all() == store.all()
        assert restored.find_by_id("w2").elevation_gain_m == -12.5

    @pytest.mark.parametrize("value", [None, []])
    def test_absent_value_gives_empty_store(self, store, value):
        add_run(store)
        store.deserialize(value)
        assert len(store) == 0


class TestDeserializeCorrupt:
    @pytest.fixture()
    def records(self, store):
        add_run(store)
        add_ride(store)
        return store.serialize()

    def assert_rejected(self, store, value):
        add_run(store)
        with pytest.raises(CorruptPersistedData):
            store.deserialize(value)
        assert len(store) == 0

    def test_not_a_list(self, store):
        self.assert_rejected(store, {"workouts": []})

    def test_record_not_a_mapping(self, store, records):
        self.assert_rejected(store, [records[0], "garbage"])

    @pytest.mark.parametrize("field", ["id", "kind", "createdAt", "distanceKm", "coordinates"])
    def test_missing_required_field(self, store, records, field):
        broken = copy.deepcopy(records)
        del broken[0][field]
        self.assert_rejected(store, broken)

    def test_missing_kind_specific_field(self, store, records):
        broken = copy.deepcopy(records)
        del broken[1]["elevationGainM"]
        self.assert_rejected(store, broken)

    def test_unknown_kind(self, store, records):
        broken = copy.deepcopy(records)
        broken[0]["kind"] = "rowing"
        self.assert_rejected(store, broken)

    def test_non_positive_distance(self, store, records):
        broken = copy.deepcopy(records)
        broken[0]["distanceKm"] = 0
        self.assert_rejected(store, broken)

    def test_tampered_metric(self, store, records):
        broken = copy.deepcopy(records)
        broken[0]["paceMinPerKm"] = 4.2
        self.assert_rejected(store, broken)

    def test_text_distance_is_not_coerced(self, store, records):
        """A number stored as text fails just as it does in add()."""
        broken = copy.deepcopy(records)
        broken[0]["distanceKm"] = "5"
        with pytest.raises(InvalidWorkoutInput):
            store.add("running", "5", 30, LONDON, 170)
        self.assert_rejected(store, broken)

    def test_bool_duration_is_not_coerced(self, store, records):
        broken = copy.deepcopy(records)
        broken[0]["durationMin"] = True
        broken[0]["paceMinPerKm"] = 0.2
        self.assert_rejected(store, broken)

    @pytest.mark.parametrize("field", ["cadenceSpm", "paceMinPerKm"])
    def test_text_kind_specific_values_are_not_coerced(self, store, records, field):
        broken = copy.deepcopy(records)
        broken[0][field] = str(broken[0][field])
        self.assert_rejected(store, broken)

    def test_text_coordinates_are_not_coerced(self, store, records):
        broken = copy.deepcopy(records)
        broken[1]["coordinates"] = ["51.5", -0.12]
        self.assert_rejected(store, broken)

    def test_duplicate_ids(self, store, records):
        broken = copy.deepcopy(records)
        broken[1]["id"] = broken[0]["id"]
        self.assert_rejected(store, broken)

    def test_stored_description_is_rederived(self, fixed_clock, records):
        edited = copy.deepcopy(records)
        edited[0]["description"] = "Something else"

        restored = WorkoutStore(clock=fixed_clock)
        restored.deserialize(edited)

        assert restored.all()[0].description == "Running on October 18"
