"""Shared fixtures: a small OpenFlights dataset around SFO, ORD and JFK."""

import pytest

from openflights.models import Airline, Airport, Route
from openflights.services import ConnectivityEngine, MutationService, ReportingEngine
from openflights.store import EntityStore

SFO = Airport(
    id=3469, name='San Francisco International Airport', city='San Francisco',
    country='United States', iata='SFO', icao='KSFO',
    latitude=37.61899948120117, longitude=-122.375, altitude=13,
    timezone=-8, dst='A', tz_database='America/Los_Angeles', type='airport', source='OurAirports',
)
ORD = Airport(
    id=3830, name="Chicago O'Hare International Airport", city='Chicago',
    country='United States', iata='ORD', icao='KORD',
    latitude=41.9786, longitude=-87.9048, altitude=672,
    timezone=-6, dst='A', tz_database='America/Chicago', type='airport', source='OurAirports',
)
JFK = Airport(
    id=3797, name='John F Kennedy International Airport', city='New York',
    country='United States', iata='JFK', icao='KJFK',
    latitude=40.63980103, longitude=-73.77890015, altitude=13,
    timezone=-5, dst='A', tz_database='America/New_York', type='airport', source='OurAirports',
)
MIA = Airport(
    id=3576, name='Miami International Airport', city='Miami',
    country='United States', iata='MIA', icao='KMIA',
    latitude=25.79319953918457, longitude=-80.29060363769531, altitude=8,
    timezone=-5, dst='A', tz_database='America/New_York', type='airport', source='OurAirports',
)

AA = Airline(
    id=1, name='American Airlines', iata='AA', icao='AAL',
    callsign='AMERICAN', country='United States', active='Y',
)
UA = Airline(
    id=2, name='United Airlines', iata='UA', icao='UAL',
    callsign='UNITED', country='United States', active='Y',
)


def route(airline: str, source: str, dest: str, stops: int = 0) -> Route:
    return Route(airline_code=airline, source_code=source, dest_code=dest, stops=stops)


def build_store(airports, airlines, routes) -> EntityStore:
    store = EntityStore()
    store.load(airports, airlines, routes)
    return store


@pytest.fixture
def store():
    """AA flies SFO->ORD and ORD->JFK."""
    return build_store(
        airports=[SFO, ORD, JFK],
        airlines=[AA],
        routes=[route('AA', 'SFO', 'ORD'), route('AA', 'ORD', 'JFK')],
    )


@pytest.fixture
def mutations(store):
    return MutationService(store)


@pytest.fixture
def connectivity(store):
    return ConnectivityEngine(store)


@pytest.fixture
def reports(store):
    return ReportingEngine(store)


@pytest.fixture
def app(store):
    from openflights.app import create_app

    app = create_app(store=store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
