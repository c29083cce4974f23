"""Tests for the HTTP service layer."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sns2ps.api import content_disposition, create_app
from sns2ps.config import Settings
from sns2ps.exceptions import ExportError, FetchError, FetchErrorKind, ParseError
from sns2ps.models import Match
from sns2ps.pipeline import RegistrationPipeline

CREDENTIALS = {"matchid": "4242", "snsusername": "user", "snspassword": "secret"}
FORM = {"matchid": "4242", "username": "user", "password": "secret"}


@pytest.fixture
def client(local_pipeline: RegistrationPipeline) -> TestClient:
    return TestClient(create_app(Settings(), local_pipeline))


def failing_client(error: Exception) -> TestClient:
    source = MagicMock()
    source.fetch_match.side_effect = error
    pipeline = RegistrationPipeline(source, "http://sns/api/")
    return TestClient(create_app(Settings(), pipeline))


def test_health_check(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "OK"


class TestMatchInfo:
    def test_success(self, client: TestClient) -> None:
        response = client.post("/matchinfo", json=CREDENTIALS)

        assert response.status_code == 200
        text = response.json()["response"]
        assert "Spring Classic 2024" in text
        assert "'Spring_Classic_2024.csv'" in text

    def test_missing_fields(self, client: TestClient) -> None:
        response = client.post("/matchinfo", json={"matchid": "4242"})

        assert response.status_code == 400
        assert "Match ID" in response.json()["response"]

    def test_invalid_body_is_validation_error(self, client: TestClient) -> None:
        response = client.post("/matchinfo", content=b"not json")
        assert response.status_code == 400

    def test_unauthorized(self) -> None:
        client = failing_client(
            FetchError("denied", kind=FetchErrorKind.UNAUTHORIZED, status_code=401)
        )
        response = client.post("/matchinfo", json=CREDENTIALS)

        assert response.status_code == 401
        assert "username and password" in response.json()["response"]

    def test_not_found_echoes_match_id(self) -> None:
        client = failing_client(
            FetchError("gone", kind=FetchErrorKind.NOT_FOUND, status_code=404)
        )
        response = client.post("/matchinfo", json={**CREDENTIALS, "matchid": "9999"})

        assert response.status_code == 404
        assert "9999" in response.json()["response"]

    def test_transport_error_is_generic(self) -> None:
        client = failing_client(
            FetchError("Request to http://sns/api/ failed: refused")
        )
        response = client.post("/matchinfo", json=CREDENTIALS)

        assert response.status_code == 502
        assert "refused" not in response.text

    def test_parse_error_is_generic(self) -> None:
        client = failing_client(ParseError("Match payload has no name"))
        response = client.post("/matchinfo", json=CREDENTIALS)
        assert response.status_code == 502

    def test_cors(self, client: TestClient) -> None:
        response = client.post(
            "/matchinfo", json=CREDENTIALS, headers={"Origin": "http://example.com"}
        )
        assert response.headers["access-control-allow-origin"] in (
            "*",
            "http://example.com",
        )


class TestRegistration:
    def test_download(self, client: TestClient) -> None:
        response = client.post("/registration", data=FORM)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            response.headers["content-disposition"]
            == "attachment; filename=Spring_Classic_2024.csv"
        )
        lines = response.content.decode("utf-8").splitlines()
        assert lines[0].startswith("Member Number,First Name,Last Name")
        assert len(lines) == 9

    def test_download_is_repeatable(self, client: TestClient) -> None:
        first = client.post("/registration", data=FORM).content
        second = client.post("/registration", data=FORM).content
        assert first == second

    def test_download_non_latin1_match_name(self) -> None:
        source = MagicMock()
        source.fetch_match.return_value = Match(id="1", name="Mistrovství ČR")
        source.fetch_squads.return_value = []
        source.fetch_competitors.return_value = []
        pipeline = RegistrationPipeline(source, "http://sns/api/")
        client = TestClient(create_app(Settings(), pipeline))

        response = client.post("/registration", data=FORM)

        assert response.status_code == 200
        header = response.headers["content-disposition"]
        assert 'filename="Mistrovstvi_CR.csv"' in header
        assert "filename*=UTF-8''Mistrovstv%C3%AD_%C4%8CR.csv" in header

    def test_missing_password(self, client: TestClient) -> None:
        response = client.post(
            "/registration", data={"matchid": "4242", "username": "user"}
        )
        assert response.status_code == 400

    def test_validation_happens_before_fetch(self) -> None:
        source = MagicMock()
        client = TestClient(
            create_app(Settings(), RegistrationPipeline(source, "http://sns/api/"))
        )

        response = client.post("/registration", data={})

        assert response.status_code == 400
        source.fetch_match.assert_not_called()

    def test_unauthorized(self) -> None:
        client = failing_client(
            FetchError("denied", kind=FetchErrorKind.UNAUTHORIZED, status_code=401)
        )
        response = client.post("/registration", data=FORM)
        assert response.status_code == 401

    def test_not_found(self) -> None:
        client = failing_client(
            FetchError("gone", kind=FetchErrorKind.NOT_FOUND, status_code=404)
        )
        response = client.post("/registration", data=FORM)

        assert response.status_code == 404
        assert "4242" in response.json()["response"]

    def test_export_error(self) -> None:
        source = MagicMock()
        source.fetch_match.return_value = Match(id="1", name="M")
        source.fetch_squads.return_value = []
        source.fetch_competitors.return_value = []
        pipeline = RegistrationPipeline(source, "http://sns/api/")
        pipeline.export = MagicMock(side_effect=ExportError("bad", row=2))
        client = TestClient(create_app(Settings(), pipeline))

        response = client.post("/registration", data=FORM)

        assert response.status_code == 500


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("Nationals.csv", "attachment; filename=Nationals.csv"),
        (
            "Кубок.csv",
            "attachment; filename=\".csv\"; filename*=UTF-8''%D0%9A%D1%83%D0%B1%D0%BE%D0%BA.csv",
        ),
        (
            'The_"A"_Cup.csv',
            "attachment; filename=\"The_A_Cup.csv\"; filename*=UTF-8''The_%22A%22_Cup.csv",
        ),
    ],
)
def test_content_disposition(filename: str, expected: str) -> None:
    assert content_disposition(filename) == expected
