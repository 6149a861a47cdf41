"""
BDD step definitions for health feature (pytest-bdd).
Challenge: Express requirements in Gherkin; map to HTTP calls.
pytest-bdd steps are synchronous, so they drive the app through TestClient.
"""

import pytest
from fastapi.testclient import TestClient
from pytest_bdd import parsers, scenarios, then, when

from kalkyla.main import app

# Load all scenarios from the feature file
scenarios("health.feature")


@pytest.fixture
def http():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def response():
    """Store last response for then steps."""
    return {}


@when(parsers.parse('I request "GET" "{path}"'))
def request_get(http, response, path):
    r = http.get(path)
    response["status"] = r.status_code
    response["body"] = r.json()


@then(parsers.parse("the response status should be {code:d}"))
def status_is(response, code):
    assert response["status"] == code


@then(parsers.parse('the response body should have "{key}" equals "{value}"'))
def body_field_equals(response, key, value):
    assert response["body"].get(key) == value
