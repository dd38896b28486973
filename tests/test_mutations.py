"""Mutation layer: inserts, partial updates and cascading deletes."""

import threading

import pytest

from openflights.errors import DuplicateCode, DuplicateId, InvalidReference, NotFound, ValidationError
from openflights.services import ConnectivityEngine, MutationService
from tests.conftest import AA


def test_insert_airline_then_lookup_by_both_keys(store, mutations):
    airline = mutations.insert_airline({'id': '42', 'iata': 'dl', 'name': 'Delta Air Lines', 'country': 'United States'})

    assert airline.iata == 'DL'
    assert store.lookup_airline_by_code('dl') == airline
    assert store.lookup_airline_by_id(42) == airline


def test_insert_airport_then_lookup_by_both_keys(store, mutations):
    airport = mutations.insert_airport({
        'id': 3484, 'iata': 'lax', 'name': 'Los Angeles International Airport',
        'city': 'Los Angeles', 'country': 'United States',
        'latitude': '33.94250107', 'longitude': '-118.4079971', 'altitude': '125',
    })

    assert airport.latitude == pytest.approx(33.94250107)
    assert airport.altitude == 125
    assert store.lookup_airport_by_code('LAX') == airport
    assert store.lookup_airport_by_id(3484) == airport


def test_insert_airline_duplicate_id(mutations):
    with pytest.raises(DuplicateId):
        mutations.insert_airline({'id': 1, 'iata': 'ZZ', 'name': 'Clash', 'country': 'Nowhere'})


def test_insert_airline_duplicate_code(store, mutations):
    with pytest.raises(DuplicateCode):
        mutations.insert_airline({'id': 77, 'iata': 'aa', 'name': 'Clash', 'country': 'Nowhere'})
    with pytest.raises(NotFound):
        store.lookup_airline_by_id(77)


def test_insert_airport_duplicate_id_and_code(mutations):
    base = {'name': 'X', 'city': 'Y', 'country': 'Z'}
    with pytest.raises(DuplicateId):
        mutations.insert_airport(dict(base, id=3469, iata='NEW'))
    with pytest.raises(DuplicateCode):
        mutations.insert_airport(dict(base, id=1, iata='Jfk'))


@pytest.mark.parametrize('payload', [
    {'iata': 'ZZ', 'name': 'No id', 'country': 'X'},
    {'id': '5', 'iata': '', 'name': 'Blank code', 'country': 'X'},
    {'id': '5', 'iata': 'ZZ', 'name': '   ', 'country': 'X'},
    {'id': 'five', 'iata': 'ZZ', 'name': 'Bad id', 'country': 'X'},
])
def test_insert_airline_validation(store, mutations, payload):
    with pytest.raises(ValidationError):
        mutations.insert_airline(payload)
    assert len(list(store.all_airlines())) == 1


def test_insert_airport_rejects_bad_coordinates(mutations):
    with pytest.raises(ValidationError):
        mutations.insert_airport({
            'id': 9, 'iata': 'BAD', 'name': 'N', 'city': 'C', 'country': 'X', 'latitude': 'north',
        })


@pytest.mark.parametrize('field, value', [
    ('latitude', 'nan'),
    ('longitude', 'inf'),
    ('timezone', '-inf'),
    ('latitude', '90.5'),
    ('longitude', '-181'),
])
def test_insert_airport_rejects_non_finite_and_out_of_range(store, mutations, field, value):
    with pytest.raises(ValidationError):
        mutations.insert_airport({
            'id': 9, 'iata': 'DEN', 'name': 'N', 'city': 'C', 'country': 'X', field: value,
        })
    assert store.working.airport_by_code('DEN') is None


def test_insert_airport_accepts_boundary_coordinates(mutations):
    airport = mutations.insert_airport({
        'id': 9, 'iata': 'NPL', 'name': 'N', 'city': 'C', 'country': 'X',
        'latitude': '90', 'longitude': '-180',
    })
    assert (airport.latitude, airport.longitude) == (90.0, -180.0)


def test_modify_airport_rejects_nan_and_keeps_record(store, mutations, connectivity):
    before = store.lookup_airport_by_code('ORD')
    for payload in ({'latitude': 'nan'}, {'longitude': '200'}):
        with pytest.raises(ValidationError):
            mutations.modify_airport(dict(payload, iata='ORD'))

    assert store.lookup_airport_by_code('ORD') == before
    assert connectivity.search('SFO', 'JFK').to_dict()['count'] >= 1


def test_modify_airline_is_partial(store, mutations):
    updated = mutations.modify_airline({'iata': 'aa', 'name': '', 'country': 'USA'})

    assert updated.name == AA.name
    assert updated.country == 'USA'
    assert store.lookup_airline_by_code('AA').country == 'USA'
    assert store.lookup_airline_by_id(1).country == 'USA'


def test_modify_airport_fields(store, mutations):
    mutations.modify_airport({'iata': 'ord', 'city': 'Chicago IL', 'altitude': '700'})

    ord_ = store.lookup_airport_by_code('ORD')
    assert ord_.city == 'Chicago IL'
    assert ord_.altitude == 700
    assert ord_.name == "Chicago O'Hare International Airport"


def test_modify_does_not_touch_keys(store, mutations):
    mutations.modify_airline({'iata': 'AA', 'id': 99, 'name': 'American'})

    assert store.lookup_airline_by_id(1).name == 'American'
    with pytest.raises(NotFound):
        store.lookup_airline_by_id(99)


def test_modify_missing_raises_not_found(mutations):
    with pytest.raises(NotFound):
        mutations.modify_airline({'iata': 'ZZ', 'name': 'Ghost'})
    with pytest.raises(NotFound):
        mutations.modify_airport({'iata': 'XXX', 'name': 'Ghost'})
    with pytest.raises(ValidationError):
        mutations.modify_airport({'name': 'No code'})


def test_delete_airline_cascades(store, mutations):
    removed = mutations.delete_airline({'iata': 'aa'})

    assert removed == 2
    with pytest.raises(NotFound):
        store.lookup_airline_by_code('AA')
    with pytest.raises(NotFound):
        store.lookup_airline_by_id(1)
    assert not [r for r in store.all_routes() if r.airline_code == 'AA']


def test_delete_airport_cascades_both_directions(store, mutations):
    mutations.insert_route({'airline': 'AA', 'source': 'JFK', 'dest': 'SFO'})

    removed = mutations.delete_airport({'iata': 'ORD'})

    assert removed == 2
    remaining = list(store.all_routes())
    assert [(r.source_code, r.dest_code) for r in remaining] == [('JFK', 'SFO')]
    with pytest.raises(NotFound):
        store.lookup_airport_by_id(3830)


def test_delete_missing_raises_not_found(mutations):
    with pytest.raises(NotFound):
        mutations.delete_airline({'iata': 'ZZ'})
    with pytest.raises(NotFound):
        mutations.delete_airport({'iata': 'XXX'})


def test_insert_route_resolves_references(store, mutations):
    created = mutations.insert_route({'airline': 'aa', 'source': 'sfo', 'dest': 'jfk'})

    assert created.stops == 0
    assert created.is_nonstop
    assert (created.airline_id, created.source_id, created.dest_id) == (1, 3469, 3797)
    assert len(list(store.all_routes())) == 3


@pytest.mark.parametrize('payload', [
    {'airline': 'ZZ', 'source': 'SFO', 'dest': 'JFK'},
    {'airline': 'AA', 'source': 'XXX', 'dest': 'JFK'},
    {'airline': 'AA', 'source': 'SFO', 'dest': 'XXX'},
])
def test_insert_route_invalid_reference(store, mutations, payload):
    with pytest.raises(InvalidReference):
        mutations.insert_route(payload)
    assert len(list(store.all_routes())) == 2


def test_insert_route_requires_fields(mutations):
    with pytest.raises(ValidationError):
        mutations.insert_route({'airline': 'AA', 'source': 'SFO'})
    with pytest.raises(ValidationError):
        mutations.insert_route({'airline': 'AA', 'source': 'SFO', 'dest': 'JFK', 'stops': '-1'})


def test_duplicate_routes_are_allowed_and_deleted_together(store, mutations):
    mutations.insert_route({'airline': 'AA', 'source': 'SFO', 'dest': 'ORD'})
    mutations.insert_route({'airline': 'AA', 'source': 'SFO', 'dest': 'ORD', 'stops': 1})

    removed = mutations.delete_route({'airline': 'aa', 'source': 'sfo', 'dest': 'ord'})

    assert removed == 3
    assert [(r.source_code, r.dest_code) for r in store.all_routes()] == [('ORD', 'JFK')]


def test_delete_route_not_found(mutations):
    with pytest.raises(NotFound):
        mutations.delete_route({'airline': 'AA', 'source': 'JFK', 'dest': 'SFO'})


def test_mutations_leave_baseline_alone(store, mutations):
    mutations.delete_airport({'iata': 'ORD'})
    mutations.modify_airline({'iata': 'AA', 'name': 'Changed'})

    assert store.baseline.airport_by_code('ORD') is not None
    assert store.baseline.airline_by_code('AA').name == AA.name
    assert len(store.baseline.routes) == 2


def test_concurrent_edits_keep_indices_consistent(store):
    mutations = MutationService(store)
    connectivity = ConnectivityEngine(store)
    errors = []

    def insert_airports(offset):
        for i in range(50):
            mutations.insert_airport({
                'id': 10000 + offset * 100 + i, 'iata': f'Q{offset}{i:02d}',
                'name': 'Generated', 'city': 'Test', 'country': 'Test',
            })

    def churn_routes():
        for _ in range(50):
            mutations.insert_route({'airline': 'AA', 'source': 'SFO', 'dest': 'ORD'})
            mutations.delete_route({'airline': 'AA', 'source': 'SFO', 'dest': 'ORD'})
            mutations.insert_route({'airline': 'AA', 'source': 'SFO', 'dest': 'ORD'})

    def search():
        try:
            for _ in range(50):
                itineraries = connectivity.one_hop('SFO', 'JFK')
                assert len(itineraries) <= 1
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=insert_airports, args=(n,)) for n in range(4)]
    threads += [threading.Thread(target=churn_routes), threading.Thread(target=search)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    with store.lock:
        dataset = store.working
        assert len(dataset.airports) == 3 + 200
        assert len(dataset.airport_ids_by_code) == 3 + 200
        for code, airport_id in dataset.airport_ids_by_code.items():
            assert dataset.airports[airport_id].iata == code
