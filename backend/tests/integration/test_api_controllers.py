"""
HTTP boundary tests through the Flask test client.
"""

import uuid

import pytest

from tests.factories.planner_factories import create_club, create_dogs


@pytest.fixture
def seeded(app_store):
    club = create_club(app_store, "API Club")
    dogs = create_dogs(app_store, club, ["Rex", "Luna"])
    return {"club": club, "dogs": dogs}


def _create_resource(client, club, name):
    response = client.post(f"/clubs/{club}/resources", json={"name": name})
    assert response.status_code == 201
    return response.get_json()["data"]


def _create_practice(client, club, when="2030-05-01T18:00:00Z"):
    response = client.post(f"/clubs/{club}/practices", json={"scheduledAt": when})
    assert response.status_code == 201
    return response.get_json()["data"]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"


class TestResourceEndpoints:
    def test_create_and_list(self, client, seeded):
        first = _create_resource(client, seeded["club"], "Main field")
        _create_resource(client, seeded["club"], "Annex")

        response = client.get(f"/clubs/{seeded['club']}/resources")

        assert first["isDefault"] is True
        names = [r["name"] for r in response.get_json()["data"]]
        assert names == ["Annex", "Main field"]

    def test_promote_and_delete(self, client, seeded):
        club = seeded["club"]
        l1 = _create_resource(client, club, "L1")
        l2 = _create_resource(client, club, "L2")

        promoted = client.put(f"/clubs/{club}/resources/{l2['id']}/default")
        deleted = client.delete(f"/clubs/{club}/resources/{l1['id']}")
        last = client.delete(f"/clubs/{club}/resources/{l2['id']}")

        assert promoted.get_json()["data"]["isDefault"] is True
        assert deleted.status_code == 200
        assert last.status_code == 409
        assert last.get_json()["error"] == "conflict"

    def test_patch_default_false_on_default_conflicts(self, client, seeded):
        club = seeded["club"]
        l1 = _create_resource(client, club, "L1")

        response = client.patch(
            f"/clubs/{club}/resources/{l1['id']}", json={"isDefault": False}
        )

        assert response.status_code == 409

    def test_malformed_club_id(self, client):
        response = client.get("/clubs/not-a-uuid/resources")

        assert response.status_code == 400
        assert response.get_json()["field"] == "club_id"

    def test_unknown_club(self, client):
        response = client.post(f"/clubs/{uuid.uuid4()}/resources", json={"name": "X"})

        assert response.status_code == 404

    def test_non_object_body(self, client, seeded):
        response = client.post(f"/clubs/{seeded['club']}/resources", json=["Main field"])

        assert response.status_code == 400


class TestPracticeEndpoints:
    def test_create_patch_status_only(self, client, seeded):
        club = seeded["club"]
        practice = _create_practice(client, club)

        response = client.patch(
            f"/clubs/{club}/practices/{practice['id']}", json={"status": "Ready"}
        )

        data = response.get_json()["data"]
        assert response.status_code == 200
        assert data["status"] == "Ready"
        assert data["scheduledAt"] == practice["scheduledAt"]

    def test_past_practice_is_rejected(self, client, seeded):
        response = client.post(
            f"/clubs/{seeded['club']}/practices", json={"scheduledAt": "2020-01-01T10:00:00Z"}
        )

        assert response.status_code == 400
        assert response.get_json()["error"] == "validation"

    def test_null_field_in_patch_is_rejected(self, client, seeded):
        club = seeded["club"]
        practice = _create_practice(client, club)

        response = client.patch(
            f"/clubs/{club}/practices/{practice['id']}", json={"scheduledAt": None}
        )

        assert response.status_code == 400

    def test_summary_and_delete(self, client, seeded):
        club = seeded["club"]
        practice = _create_practice(client, club)

        summary = client.get(f"/clubs/{club}/practices/{practice['id']}/summary")
        deleted = client.delete(f"/clubs/{club}/practices/{practice['id']}")
        missing = client.get(f"/clubs/{club}/practices/{practice['id']}")

        assert summary.get_json()["data"]["unconfirmedCount"] == 2
        assert deleted.status_code == 200
        assert missing.status_code == 404


class TestSetEndpoints:
    def test_create_reorder_and_list(self, client, seeded):
        club = seeded["club"]
        _create_resource(client, club, "Main field")
        practice = _create_practice(client, club)
        base = f"/practices/{practice['id']}/sets"

        s1 = client.post(base, json={"order": 1}).get_json()["data"]
        s2 = client.post(
            base, json={"order": 2, "dogs": [{"dogId": seeded["dogs"][0], "lane": "A"}]}
        ).get_json()["data"]

        reordered = client.put(
            f"{base}/reorder",
            json={"sets": [{"setId": s1["id"], "order": 3}, {"setId": s2["id"], "order": 1}]},
        )
        listed = client.get(base).get_json()["data"]

        assert reordered.status_code == 200
        assert [s["id"] for s in listed] == [s2["id"], s1["id"]]
        assert listed[0]["dogs"][0]["lane"] == "A"

    def test_reorder_set_dogs_and_assign(self, client, seeded):
        club = seeded["club"]
        dogs = seeded["dogs"]
        _create_resource(client, club, "Main field")
        practice = _create_practice(client, club)
        base = f"/practices/{practice['id']}/sets"
        practice_set = client.post(base, json={"order": 1}).get_json()["data"]

        reordered = client.put(
            f"{base}/{practice_set['id']}/setdogs/reorder",
            json={"dogs": [{"dogId": dogs[1], "order": 0}, {"dogId": dogs[0], "order": 1}]},
        )
        assigned = client.put(
            f"{base}/{practice_set['id']}/setdogs",
            json={"dogs": [{"dogId": dogs[0], "order": 0}]},
        )

        assert [d["dogId"] for d in reordered.get_json()["data"]] == [dogs[1], dogs[0]]
        assert [d["dogId"] for d in assigned.get_json()["data"]["dogs"]] == [dogs[0]]

    def test_non_integer_order(self, client, seeded):
        club = seeded["club"]
        _create_resource(client, club, "Main field")
        practice = _create_practice(client, club)
        base = f"/practices/{practice['id']}/sets"
        practice_set = client.post(base, json={"order": 1}).get_json()["data"]

        response = client.put(
            f"{base}/reorder", json={"sets": [{"setId": practice_set["id"], "order": "2"}]}
        )

        assert response.status_code == 400

    def test_set_of_another_practice_is_not_found(self, client, seeded):
        club = seeded["club"]
        dogs = seeded["dogs"]
        _create_resource(client, club, "Main field")
        first = _create_practice(client, club)
        second = _create_practice(client, club, "2030-05-02T18:00:00Z")
        practice_set = client.post(
            f"/practices/{first['id']}/sets", json={"order": 1}
        ).get_json()["data"]
        foreign = f"/practices/{second['id']}/sets/{practice_set['id']}/setdogs"

        assigned = client.put(foreign, json={"dogs": [{"dogId": dogs[0], "order": 0}]})
        reordered = client.put(
            f"{foreign}/reorder", json={"dogs": [{"dogId": dogs[0], "order": 0}]}
        )
        listed = client.get(f"/practices/{first['id']}/sets").get_json()["data"]

        assert assigned.status_code == 404
        assert reordered.status_code == 404
        assert listed[0]["dogs"] == []

    def test_delete_set(self, client, seeded):
        club = seeded["club"]
        _create_resource(client, club, "Main field")
        practice = _create_practice(client, club)
        base = f"/practices/{practice['id']}/sets"
        practice_set = client.post(base, json={"order": 1}).get_json()["data"]

        assert client.delete(f"{base}/{practice_set['id']}").status_code == 200
        assert client.get(base).get_json()["data"] == []


class TestAttendanceEndpoints:
    def test_batch_and_single_updates(self, client, seeded):
        club = seeded["club"]
        dogs = seeded["dogs"]
        practice = _create_practice(client, club)
        base = f"/clubs/{club}/practices/{practice['id']}/attendance"

        batch = client.put(
            base,
            json={"updates": [{"dogId": dogs[0], "status": "Yes"}, {"dogId": dogs[1], "status": 1}]},
        )
        single = client.put(f"{base}/{dogs[1]}", json={"status": "Yes"})
        listed = client.get(base).get_json()["data"]

        assert batch.status_code == 200
        assert [r["status"] for r in batch.get_json()["data"]] == ["Yes", "No"]
        assert single.get_json()["data"]["attending"] == 2
        assert listed == {dogs[0]: "Yes", dogs[1]: "Yes"}

    def test_failing_batch_persists_nothing(self, client, seeded):
        club = seeded["club"]
        practice = _create_practice(client, club)
        base = f"/clubs/{club}/practices/{practice['id']}/attendance"

        response = client.put(
            base,
            json={
                "updates": [
                    {"dogId": seeded["dogs"][0], "status": "Yes"},
                    {"dogId": str(uuid.uuid4()), "status": "Yes"},
                ]
            },
        )

        assert response.status_code == 404
        assert client.get(base).get_json()["data"] == {}

    def test_invalid_status(self, client, seeded):
        club = seeded["club"]
        practice = _create_practice(client, club)

        response = client.put(
            f"/clubs/{club}/practices/{practice['id']}/attendance/{seeded['dogs'][0]}",
            json={"status": "Maybe"},
        )

        assert response.status_code == 400
        assert response.get_json()["field"] == "status"
