"""Entity store: lookups, indices, snapshots and baseline isolation."""

import dataclasses

import pytest

from openflights.errors import NotFound
from openflights.models import Airline, Airport
from openflights.store import Dataset, EntityStore
from tests.conftest import AA, JFK, ORD, SFO, route


def test_lookup_by_code_is_case_insensitive(store):
    assert store.lookup_airport_by_code('sfo') == SFO
    assert store.lookup_airport_by_code(' Sfo ') == SFO
    assert store.lookup_airline_by_code('aa') == store.lookup_airline_by_code('AA') == AA


def test_lookup_by_id(store):
    assert store.lookup_airport_by_id(3830) == ORD
    assert store.lookup_airline_by_id(1) == AA


def test_missing_lookups_raise_not_found(store):
    with pytest.raises(NotFound):
        store.lookup_airport_by_code('XXX')
    with pytest.raises(NotFound):
        store.lookup_airline_by_code('ZZ')
    with pytest.raises(NotFound):
        store.lookup_airport_by_code('')
    with pytest.raises(NotFound):
        store.lookup_airline_by_id(999)


def test_listings_cover_working_copy(store):
    assert {a.iata for a in store.all_airports()} == {'SFO', 'ORD', 'JFK'}
    assert [a.iata for a in store.all_airlines()] == ['AA']
    assert [(r.source_code, r.dest_code) for r in store.all_routes()] == [
        ('SFO', 'ORD'),
        ('ORD', 'JFK'),
    ]


def test_listing_is_a_snapshot(store):
    routes = store.all_routes()
    first = next(routes)

    with store.lock:
        store.working.remove_airport(ORD)

    # The iterator keeps walking the snapshot taken when it was created
    assert first.source_code == 'SFO'
    assert [r.dest_code for r in routes] == ['JFK']
    assert list(store.all_routes()) == []


def test_working_copy_edits_never_reach_baseline(store):
    with store.lock:
        store.working.remove_airport(ORD)
        store.working.put_airport(dataclasses.replace(SFO, name='Renamed'))

    assert store.baseline.airport_by_code('ORD') == ORD
    assert store.baseline.airport_by_code('SFO').name == SFO.name
    assert len(store.baseline.routes) == 2


def test_reset_restores_baseline(store):
    with store.lock:
        store.working.remove_airline(AA)
    assert store.stats['working']['routes'] == 0

    stats = store.reset()

    assert stats['routes'] == 2
    assert store.lookup_airline_by_code('AA') == AA


def test_null_code_is_not_indexed():
    dataset = Dataset()
    dataset.put_airport(Airport(id=7, name='Strip', iata=None))

    assert dataset.airports[7].name == 'Strip'
    assert dataset.airport_ids_by_code == {}


def test_replacing_an_id_drops_the_stale_code():
    dataset = Dataset()
    dataset.put_airport(Airport(id=1, iata='AAA'))
    dataset.put_airport(Airport(id=1, iata='BBB'))

    assert dataset.airport_by_code('AAA') is None
    assert dataset.airport_by_code('BBB').id == 1
    assert len(dataset.airports) == 1


def test_taking_over_a_code_clears_it_from_the_previous_owner():
    dataset = Dataset()
    dataset.put_airport(Airport(id=1, iata='XXX', name='First'))
    dataset.put_airport(Airport(id=2, iata='XXX', name='Second'))
    dataset.put_airline(Airline(id=1, iata='QQ', name='First'))
    dataset.put_airline(Airline(id=2, iata='QQ', name='Second'))

    assert dataset.airport_by_code('XXX').name == 'Second'
    assert dataset.airports[1].iata is None
    assert dataset.airports[1].name == 'First'
    assert dataset.airlines[1].iata is None

    # Once the owner is gone the code is free, and only one record carries it
    dataset.remove_airport(dataset.airports[2])
    dataset.put_airport(Airport(id=3, iata='XXX'))
    assert [a.id for a in dataset.airports.values() if a.iata == 'XXX'] == [3]


def test_cascade_uses_reverse_indices():
    dataset = Dataset()
    for airport in (SFO, ORD, JFK):
        dataset.put_airport(airport)
    dataset.add_route(route('AA', 'SFO', 'ORD'))
    dataset.add_route(route('UA', 'ORD', 'JFK'))
    dataset.add_route(route('AA', 'JFK', 'SFO'))

    removed = dataset.remove_airport(ORD)

    assert removed == 2
    assert [r.airline_code for r in dataset.routes.values()] == ['AA']
    assert 'ORD' not in dataset.route_ids_by_airport
    assert 'UA' not in dataset.route_ids_by_airline


def test_routes_from_keeps_load_order(store):
    with store.lock:
        store.working.add_route(route('AA', 'SFO', 'JFK'))
        store.working.add_route(route('AA', 'JFK', 'SFO'))
        outbound = store.working.routes_from('SFO')

    assert [r.dest_code for r in outbound] == ['ORD', 'JFK']


def test_load_replaces_baseline():
    store = EntityStore()
    stats = store.load([SFO, JFK], [AA], [route('AA', 'SFO', 'JFK')])

    assert stats['airports'] == 2
    assert stats['routes'] == 1
    assert store.stats['working'] == store.stats['baseline']
