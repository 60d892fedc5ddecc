import pytest
from fastapi.testclient import TestClient

from review_insight.domain.errors import UpstreamError
from review_insight.web.app import app, get_service

from .conftest import EMOTION_PAYLOAD, FACTOR_PAYLOAD, fenced, place_record
from .test_analysis_service import build_service


@pytest.fixture
def client_for(db):
    def make(replies, places=None):
        service, _ = build_service(db, replies, places=places)
        app.dependency_overrides[get_service] = lambda: service
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


def test_post_and_get_analysis(client_for):
    client = client_for([fenced(FACTOR_PAYLOAD)])

    response = client.post("/api/analyze", json={"place_id": "place-1", "user_id": "owner-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["result"]["overall_score"] == 82

    latest = client.get("/api/analyze", params={"store_id": body["store_id"]})
    assert latest.status_code == 200
    assert latest.json()["analysis"]["sentiment"] == "positive"


def test_missing_ids_are_bad_requests(client_for):
    client = client_for([fenced(FACTOR_PAYLOAD)])

    response = client.post("/api/analyze", json={"place_id": "place-1"})

    assert response.status_code == 400
    assert "user_id" in response.json()["error"]
    assert client.get("/api/analyze").status_code == 400


def test_unknown_place_is_not_found(client_for):
    client = client_for([fenced(FACTOR_PAYLOAD)])

    response = client.post("/api/analyze", json={"place_id": "nowhere", "user_id": "owner-1"})

    assert response.status_code == 404


def test_malformed_model_output_is_bad_gateway(client_for):
    client = client_for(["not json"])

    response = client.post("/api/analyze", json={"place_id": "place-1", "user_id": "owner-1"})

    assert response.status_code == 502
    assert response.json()["error"] == "Analysis failed"
    assert response.json()["details"]


def test_upstream_failure_is_bad_gateway(client_for):
    client = client_for([UpstreamError("LLM API error: 503", status="503")])

    response = client.post("/api/emotion-analysis", json={"place_id": "place-1"})

    assert response.status_code == 502


def test_emotion_round_trip(client_for):
    client = client_for([fenced(FACTOR_PAYLOAD), fenced(EMOTION_PAYLOAD)])
    store_id = client.post("/api/analyze", json={"place_id": "place-1", "user_id": "o"}).json()["store_id"]

    posted = client.post("/api/emotion-analysis", json={"place_id": "place-1", "store_id": store_id})
    fetched = client.get("/api/emotion-analysis", params={"store_id": store_id})

    assert posted.status_code == 200
    assert posted.json()["result"]["dominant_emotion"] == "satisfaction"
    assert fetched.status_code == 200
    assert fetched.json()["dominant_emotion"] == "satisfaction"


def test_emotions_before_any_run_are_not_found(client_for):
    client = client_for([fenced(FACTOR_PAYLOAD)])
    store_id = client.post("/api/analyze", json={"place_id": "place-1", "user_id": "o"}).json()["store_id"]

    response = client.get("/api/emotion-analysis", params={"store_id": store_id})

    assert response.status_code == 404
    assert "run analysis first" in response.json()["error"]


def test_health(client_for):
    assert client_for([]).get("/api/health").json() == {"status": "ok"}
