"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Shared fixtures: a testing app with a seeded in-memory catalog, a Flask test
client, and a manual scheduler so deferred payment transitions run on demand.
"""

import os, sys
from datetime import date
import pytest

# --- Make sure project root is importable ---
TESTS_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(TESTS_DIR, os.pardir, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import create_app, socketio
from models import db, Restaurant
from payment import ManualScheduler
from seed import seed

TODAY = date(2025, 4, 15)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def app(scheduler):
    app = create_app(testing=True)
    payments = app.extensions["payments"]
    payments.scheduler = scheduler
    payments.clock = lambda: TODAY
    with app.app_context():
        db.drop_all()
        db.create_all()
        seed()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def events(app):
    sio = socketio.test_client(app)
    yield sio
    if sio.is_connected():
        sio.disconnect()


@pytest.fixture
def bella(app):
    with app.app_context():
        return Restaurant.query.filter_by(name="La Bella Italia").one().id


@pytest.fixture
def valid_fields():
    return {
        "cardholder_name": "Jane Doe",
        "card_number": "4532 0151 1283 0366",
        "expiry": "12/30",
        "cvv": "123",
    }
