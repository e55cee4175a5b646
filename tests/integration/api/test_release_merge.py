"""Integration tests for the release merge form and API.

Hey future me - these run against the seeded catalogue from conftest._seed:
releases 1 + 2 share an artist and one medium each, release 3 has the same track count but a
different artist, release 4 has a single track. A fresh database per test means the first
edit is always #1.
"""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


def _merge_form(strategy: int, target: int, *release_ids: int, **extra: str) -> dict:
    return {
        "merge_strategy": str(strategy),
        "target": str(target),
        "merging": [str(release_id) for release_id in release_ids],
        **extra,
    }


# =============================================================================
# FORM
# =============================================================================


def test_merge_form_proposes_disc_position_from_title(client: TestClient) -> None:
    response = client.get("/release/merge", params={"id": [1, 2]})

    assert response.status_code == 200
    html = response.text
    assert 'name="medium_positions.0.position" value="1"' in html
    # "Greatest Hits (disc 2: Bonus)" lands on position 2, named Bonus
    assert 'name="medium_positions.1.position" value="2"' in html
    assert 'name="medium_positions.1.name" value="Bonus"' in html
    assert 'id="bad-recording-merges"' not in html


def test_merge_form_warns_about_other_artist(client: TestClient) -> None:
    response = client.get("/release/merge", params={"id": [1, 3]})

    assert response.status_code == 200
    assert 'id="bad-recording-merges"' in response.text
    assert "Somebody Else" in response.text


def test_merge_form_needs_two_releases(client: TestClient) -> None:
    response = client.get("/release/merge", params={"id": [1, 1]})

    assert response.status_code == 400
    assert response.json() == {"detail": "Select at least two releases to merge."}


def test_merge_form_unknown_release(client: TestClient) -> None:
    response = client.get("/release/merge", params={"id": [1, 999]})

    assert response.status_code == 404


def test_merge_form_without_ids_is_invalid(client: TestClient) -> None:
    response = client.get("/release/merge")

    assert response.status_code == 422


# =============================================================================
# FORM POST
# =============================================================================


def test_append_post_redirects_to_edit(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/release/merge",
        data=_merge_form(1, 1, 1, 2, edit_note="  Two halves of one release  "),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/edit/1"

    edit = client.get("/api/edit/1").json()
    assert edit["edit_type"] == 223
    assert edit["editor_id"] == 42
    assert edit["status"] == "open"
    assert edit["release_ids"] == [1, 2]
    assert edit["data"]["edit_note"] == "Two halves of one release"
    changes = {c["release"]["id"]: c for c in edit["data"]["medium_changes"]}
    assert list(changes) == [1, 2]
    change = changes[2]
    assert change["mediums"][0]["new_position"] == 2
    assert change["mediums"][0]["new_name"] == "Bonus"


def test_append_post_with_explicit_positions(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    form = _merge_form(1, 2, 1, 2)
    form.update(
        {
            "medium_positions.0.id": "1",
            "medium_positions.0.release_id": "1",
            "medium_positions.0.position": "3",
            "medium_positions.0.name": "Main",
            "medium_positions.1.id": "2",
            "medium_positions.1.release_id": "2",
            "medium_positions.1.position": "1",
            "medium_positions.1.name": "",
        }
    )

    response = client.post(
        "/release/merge", data=form, headers=editor_headers, follow_redirects=False
    )

    assert response.status_code == 303
    edit = client.get("/api/edit/1").json()
    assert edit["release_ids"] == [1, 2]
    assert edit["data"]["new_entity"]["id"] == 2


def test_append_post_with_colliding_positions_rerenders(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    form = _merge_form(1, 1, 1, 2)
    form.update(
        {
            "medium_positions.0.id": "1",
            "medium_positions.0.release_id": "1",
            "medium_positions.0.position": "1",
            "medium_positions.1.id": "2",
            "medium_positions.1.release_id": "2",
            "medium_positions.1.position": "1",
        }
    )

    response = client.post(
        "/release/merge", data=form, headers=editor_headers, follow_redirects=False
    )

    assert response.status_code == 200
    assert "This merge strategy is not applicable" in response.text
    assert client.get("/api/edit/1").status_code == 404


def test_append_post_with_repeated_medium_rerenders(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    form = _merge_form(1, 1, 1, 2)
    form.update(
        {
            "medium_positions.0.id": "1",
            "medium_positions.0.release_id": "1",
            "medium_positions.0.position": "1",
            "medium_positions.1.id": "2",
            "medium_positions.1.release_id": "2",
            "medium_positions.1.position": "2",
            "medium_positions.2.id": "1",
            "medium_positions.2.release_id": "1",
            "medium_positions.2.position": "3",
        }
    )

    response = client.post(
        "/release/merge", data=form, headers=editor_headers, follow_redirects=False
    )

    assert response.status_code == 200
    assert 'data-field="medium_positions"' in response.text
    assert client.get("/api/edit/1").status_code == 404


def test_post_without_editor_is_unauthorized(client: TestClient) -> None:
    response = client.post(
        "/release/merge", data=_merge_form(1, 1, 1, 2), follow_redirects=False
    )

    assert response.status_code == 401


def test_post_with_garbage_editor_header(client: TestClient) -> None:
    response = client.post(
        "/release/merge",
        data=_merge_form(1, 1, 1, 2),
        headers={"X-Editor-Id": "not-a-number"},
        follow_redirects=False,
    )

    assert response.status_code == 401


# Hey future me - MERGE across artists is the two-step dance: first post is bounced with the
# confirmation error, second post with the checkbox ticked goes through.
def test_merge_other_artist_needs_confirmation(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    first = client.post(
        "/release/merge",
        data=_merge_form(2, 1, 1, 3),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert first.status_code == 200
    assert 'data-field="confirm_bad_recording_merges"' in first.text
    assert "1.1, 1.2" in first.text

    second = client.post(
        "/release/merge",
        data=_merge_form(2, 1, 1, 3, confirm_bad_recording_merges="1"),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert second.status_code == 303
    assert second.headers["location"] == "/edit/1"
    edit = client.get("/api/edit/1").json()
    assert edit["data"]["merge_strategy"] == 2
    assert len(edit["data"]["recording_merges"]) == 2


def test_merge_same_artist_goes_straight_through(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/release/merge",
        data=_merge_form(2, 1, 1, 2),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert response.status_code == 303


def test_merge_with_different_track_counts_is_not_applicable(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/release/merge",
        data=_merge_form(2, 1, 1, 4),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert response.status_code == 200
    assert 'data-field="merge_strategy"' in response.text


def test_target_outside_selection_is_not_applicable(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/release/merge",
        data=_merge_form(2, 3, 1, 2),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert response.status_code == 200
    assert "This merge strategy is not applicable" in response.text


def test_missing_strategy_rerenders_with_field_error(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/release/merge",
        data={"target": "1", "merging": ["1", "2"]},
        headers=editor_headers,
        follow_redirects=False,
    )

    assert response.status_code == 200
    assert 'data-field="merge_strategy"' in response.text


def test_single_release_post_is_bad_request(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/release/merge",
        data=_merge_form(1, 1, 1),
        headers=editor_headers,
        follow_redirects=False,
    )

    assert response.status_code == 400


# =============================================================================
# JSON API
# =============================================================================


def test_preview(client: TestClient) -> None:
    response = client.get("/api/release/merge/preview", params={"id": [1, 2], "target": 2})

    assert response.status_code == 200
    payload = response.json()
    assert payload["target"] == 2
    assert [r["id"] for r in payload["releases"]] == [1, 2]
    assert {p["id"]: p["position"] for p in payload["medium_positions"]} == {2: 2, 1: 1}
    assert len(payload["recording_merges"]) == 2
    assert payload["bad_recording_merges"] == []


def test_api_merge_creates_edit(client: TestClient, editor_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/release/merge",
        json={"merge_strategy": 2, "target": 1, "merging": [1, 2]},
        headers=editor_headers,
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["id"] == 1
    assert payload["edit_type"] == 223
    assert payload["release_ids"] == [1, 2]
    assert payload["data"]["new_entity"]["id"] == 1
    assert [e["id"] for e in payload["data"]["old_entities"]] == [2]


def test_api_merge_rejection_returns_form(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/api/release/merge",
        json={"merge_strategy": 2, "target": 1, "merging": [1, 4]},
        headers=editor_headers,
    )

    assert response.status_code == 422
    payload = response.json()
    assert list(payload["errors"]) == ["merge_strategy"]
    assert payload["form"]["target"] == 1


def test_api_merge_unknown_medium_is_server_error(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    response = client.post(
        "/api/release/merge",
        json={
            "merge_strategy": 1,
            "target": 1,
            "merging": [1, 2],
            "medium_positions": [
                {"id": 1, "release_id": 1, "position": 1},
                {"id": 999, "release_id": 2, "position": 2},
            ],
        },
        headers=editor_headers,
    )

    assert response.status_code == 500
    assert client.get("/api/edit/1").status_code == 404


def test_api_merge_invalid_strategy(client: TestClient, editor_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/release/merge",
        json={"merge_strategy": 7, "target": 1, "merging": [1, 2]},
        headers=editor_headers,
    )

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"][-1] == "merge_strategy"
