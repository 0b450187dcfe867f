import pytest

from coachplan.services import grouping, plans


@pytest.fixture
def trainer_headers(trainer, auth_headers):
    return auth_headers(trainer)


@pytest.fixture
def athlete_headers(athlete, auth_headers):
    return auth_headers(athlete)


class TestAuth:

    def test_token_required(self, http):
        response = http.get("/trainer/templates")
        assert response.status_code == 401
        assert "msg" in response.get_json()

    def test_client_cannot_use_trainer_routes(self, http, athlete_headers):
        response = http.get("/trainer/templates", headers=athlete_headers)
        assert response.status_code == 403

    def test_other_client_cannot_see_plan(self, http, plan, other_athlete, auth_headers):
        response = http.get(f"/client/plans/{plan.id}", headers=auth_headers(other_athlete))
        assert response.status_code == 403

    def test_admin_cannot_create_plans_under_own_id(self, http, admin, athlete, plan, auth_headers, monday):
        headers = auth_headers(admin)
        response = http.post("/trainer/plans", headers=headers, json={
            "client_id": athlete.id, "week_start": monday.isoformat(), "day_of_week": 2,
        })
        assert response.status_code == 403
        response = http.post("/trainer/weeks/copy", headers=headers, json={
            "client_id": athlete.id, "source_week": monday.isoformat(), "target_week": "2026-10-19",
        })
        assert response.status_code == 403

        response = http.get(f"/trainer/plans/{plan.id}", headers=headers)
        assert response.status_code == 200

    def test_health(self, http):
        assert http.get("/health").get_json() == {"status": "ok"}


class TestTrainerFlow:

    def test_build_plan_and_group(self, http, trainer_headers, athlete, monday):
        response = http.post("/trainer/plans", headers=trainer_headers, json={
            "client_id": athlete.id, "week_start": monday.isoformat(), "day_of_week": 1, "name": "Push",
        })
        assert response.status_code == 201
        plan_id = response.get_json()["id"]

        ids = []
        for name in ("Bench", "Fly", "Dips"):
            response = http.post(f"/trainer/plans/{plan_id}/exercises", headers=trainer_headers,
                                 json={"name": name, "sets": 3, "reps": "10"})
            assert response.status_code == 201
            ids.append(response.get_json()["id"])

        response = http.post(f"/trainer/plans/{plan_id}/groups", headers=trainer_headers,
                             json={"exercise_ids": ids[:2], "kind": "superset", "rest_seconds": 30})
        assert response.status_code == 201
        group = response.get_json()
        assert [m["name"] for m in group["members"]] == ["Bench", "Fly"]

        response = http.put(f"/trainer/plans/{plan_id}/units/order", headers=trainer_headers,
                            json={"order": [f"exercise:{ids[2]}", group["key"]]})
        assert response.status_code == 200
        assert [u["type"] for u in response.get_json()] == ["exercise", "group"]

        response = http.get(f"/trainer/plans/{plan_id}", headers=trainer_headers)
        detail = response.get_json()
        assert [u["key"] for u in detail["units"]] == [f"exercise:{ids[2]}", group["key"]]

        response = http.delete(f"/trainer/groups/{group['group_id']}", headers=trainer_headers)
        assert response.get_json()["released"] == 2
        response = http.delete(f"/trainer/groups/{group['group_id']}", headers=trainer_headers)
        assert response.status_code == 200
        assert response.get_json()["released"] == 0

    def test_create_plan_defaults_to_active_week(self, http, trainer_headers, athlete):
        response = http.put("/trainer/active-week", headers=trainer_headers,
                            json={"client_id": athlete.id, "week_start": "2026-11-02"})
        assert response.status_code == 200

        response = http.post("/trainer/plans", headers=trainer_headers,
                             json={"client_id": athlete.id, "day_of_week": 0})
        assert response.get_json()["week_start"] == "2026-11-02"

        response = http.put("/trainer/active-week", headers=trainer_headers,
                            json={"client_id": athlete.id, "weeks": 1})
        assert response.get_json()["week_start"] == "2026-11-09"

        response = http.get(f"/trainer/clients/{athlete.id}/week", headers=trainer_headers)
        assert response.get_json()["week_start"] == "2026-11-09"
        assert response.get_json()["days"] == {}

    def test_invalid_payloads(self, http, trainer_headers, athlete, plan):
        response = http.post("/trainer/plans", headers=trainer_headers,
                             json={"client_id": athlete.id, "day_of_week": 9})
        assert response.status_code == 400
        assert "day_of_week" in response.get_json()["errors"]

        response = http.put("/trainer/active-week", headers=trainer_headers,
                            json={"client_id": athlete.id, "week_start": "2026-11-04"})
        assert response.status_code == 400

        response = http.post(f"/trainer/plans/{plan.id}/groups", headers=trainer_headers,
                             json={"exercise_ids": [1], "kind": "superset"})
        assert response.status_code == 400

    def test_block_reorder_mismatch(self, http, trainer_headers, plan):
        ids = []
        for preset in ("warmup-quick", "hiit-bike-10x30"):
            response = http.post(f"/trainer/plans/{plan.id}/blocks/from-source", headers=trainer_headers,
                                 json={"preset_id": preset})
            assert response.status_code == 201
            ids.append(response.get_json()["id"])

        response = http.put(f"/trainer/plans/{plan.id}/blocks/order", headers=trainer_headers,
                            json={"position": "start", "order": ids[:1]})
        assert response.status_code == 400
        assert response.get_json()["errors"]["expected"] == sorted(ids)

        response = http.put(f"/trainer/plans/{plan.id}/blocks/order", headers=trainer_headers,
                            json={"position": "start", "order": list(reversed(ids))})
        assert response.status_code == 200
        assert [b["id"] for b in response.get_json()["start"]] == list(reversed(ids))

    def test_unknown_plan(self, http, trainer_headers):
        response = http.get("/trainer/plans/999", headers=trainer_headers)
        assert response.status_code == 404
        assert response.get_json()["msg"] == "Plan 999 not found"


class TestClientFlow:

    def test_session_lifecycle(self, http, athlete_headers, plan, add_exercises):
        exercise, = add_exercises("Squat")

        response = http.post("/client/sessions", headers=athlete_headers, json={"plan_id": plan.id})
        assert response.status_code == 201
        session_id = response.get_json()["id"]

        response = http.post("/client/sessions", headers=athlete_headers, json={"plan_id": plan.id})
        assert response.status_code == 409
        assert response.get_json()["errors"] == {"session_id": session_id}

        response = http.post(f"/client/sessions/{session_id}/rest/start", headers=athlete_headers,
                             json={"kind": "between_sets"})
        assert response.status_code == 201
        for _ in range(2):
            response = http.post(f"/client/sessions/{session_id}/rest/end", headers=athlete_headers)
            assert response.status_code == 200

        response = http.put(f"/client/exercises/{exercise.id}/completed", headers=athlete_headers,
                            json={"completed": True})
        assert response.get_json()["completed"] is True

        response = http.put(f"/client/exercises/{exercise.id}/executed-load", headers=athlete_headers,
                            json={"executed_load": "60kg"})
        assert response.get_json()["executed_load"] == "60kg"

        response = http.post(f"/client/sessions/{session_id}/pause", headers=athlete_headers)
        assert response.get_json()["status"] == "paused"
        response = http.post(f"/client/sessions/{session_id}/pause", headers=athlete_headers)
        assert response.status_code == 409

        response = http.post(f"/client/sessions/{session_id}/finish", headers=athlete_headers,
                             json={"notes": "good", "complete_plan": True})
        assert response.get_json()["status"] == "finished"
        assert plans.get_plan(plan.id).completed is True

        response = http.get(f"/client/sessions/{session_id}/summary", headers=athlete_headers)
        assert response.get_json()["rest_count"] == 1

    def test_week_view(self, http, athlete_headers, athlete, trainer, monday, plan):
        response = http.get(f"/client/week?week_start={monday.isoformat()}", headers=athlete_headers)
        body = response.get_json()
        assert body["week_start"] == monday.isoformat()
        assert [p["id"] for p in body["days"]["0"]] == [plan.id]

    def test_plan_detail_shows_units(self, http, athlete_headers, plan, add_exercises):
        a, b = add_exercises("A", "B")
        grouping.create_group(plan.id, [a.id, b.id], "superset")

        body = http.get(f"/client/plans/{plan.id}", headers=athlete_headers).get_json()
        assert body["active_session"] is None
        assert len(body["units"]) == 1
        assert body["units"][0]["kind"] == "superset"

    def test_active_week_follows_trainer_pointer(self, http, athlete_headers, athlete, trainer_headers):
        http.put("/trainer/active-week", headers=trainer_headers,
                 json={"client_id": athlete.id, "week_start": "2026-11-16"})
        response = http.get("/client/active-week", headers=athlete_headers)
        assert response.get_json() == {"client_id": athlete.id, "week_start": "2026-11-16"}
