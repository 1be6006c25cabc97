"""
Tests for API endpoints.
"""

import inspect
from unittest.mock import patch

from app.routes import risk as risk_routes
from app.scoring import recommendations as rec


def create_student(client, student_number="2024-001", **metrics):
    payload = {"full_name": "Ana Reyes", "student_number": student_number, "grade": "10"}
    payload.update(metrics)
    response = client.post("/api/students", json=payload)
    assert response.status_code == 201
    return response.json()


def create_teacher(client, teacher_number="T-001", **fields):
    payload = {"full_name": "Marta Quispe", "teacher_number": teacher_number, "department": "Science"}
    payload.update(fields)
    response = client.post("/api/teachers", json=payload)
    assert response.status_code == 201
    return response.json()


class TestStudentEndpoints:
    """Test student profile endpoints."""

    def test_create_student(self, client):
        """Test creating a student."""
        data = create_student(client, cgpa=12, fee_payment_status="overdue")

        assert data["cgpa"] == 10.0
        assert data["fee_payment_status"] == "overdue"

    def test_create_duplicate_student(self, client):
        """Test duplicate student numbers are rejected."""
        create_student(client)
        response = client.post("/api/students", json={"full_name": "Other", "student_number": "2024-001"})
        assert response.status_code == 409

    def test_create_student_validation(self, client):
        """Test missing required fields."""
        response = client.post("/api/students", json={"full_name": "No Number"})
        assert response.status_code == 422

    def test_get_student_pending_risk(self, client):
        """Test a student with no assessment reports a pending risk status."""
        student = create_student(client)

        response = client.get(f"/api/students/{student['id']}")

        assert response.status_code == 200
        assert response.json()["risk"] == {"status": "pending", "risk_level": None, "risk_score": None}

    def test_get_missing_student(self, client):
        """Test getting a missing student."""
        assert client.get("/api/students/missing").status_code == 404

    def test_list_students(self, client):
        """Test listing students with their risk status."""
        student = create_student(client, assigned_teacher_id="t1")
        create_student(client, student_number="2024-002", assigned_teacher_id="t2")
        client.post(f"/api/risk/{student['id']}/calculate")

        response = client.get("/api/students?teacher_id=t1")

        data = response.json()
        assert data["total"] == 1
        assert data["students"][0]["risk"]["status"] == "calculated"

    def test_update_metrics(self, client):
        """Test updating metrics."""
        student = create_student(client)

        response = client.patch(f"/api/students/{student['id']}/metrics", json={"attendance_rate": 45})

        assert response.status_code == 200
        assert response.json()["attendance_rate"] == 45.0

    def test_update_metrics_missing_student(self, client):
        response = client.patch("/api/students/missing/metrics", json={"attendance_rate": 45})
        assert response.status_code == 404


class TestRiskEndpoints:
    """Test risk assessment endpoints."""

    def test_calculate_and_latest(self, client):
        """Test calculating risk and reading back the latest assessment."""
        student = create_student(
            client, cgpa=3.0, assignment_completion_rate=40, test_score_average=35, attendance_rate=55,
            login_frequency=1, class_participation_score=20, challenge_completion_rate=10,
            fee_payment_status="overdue", total_absences=15, tardiness_count=8,
        )

        assert client.get(f"/api/risk/{student['id']}/latest").json() == {"status": "pending", "assessment": None}

        response = client.post(f"/api/risk/{student['id']}/calculate")
        assert response.status_code == 200
        data = response.json()
        assert data["assessment"]["risk_level"] == "high"
        assert rec.COMPOUND_RISK in data["assessment"]["recommendations"]
        assert set(data["algorithm_scores"]) == {"rule_based", "ml_based", "holistic", "ml_holistic"}
        assert data["temporal"]["trend"] == "insufficient_data"

        latest = client.get(f"/api/risk/{student['id']}/latest").json()
        assert latest["status"] == "calculated"
        assert latest["assessment"]["id"] == data["assessment"]["id"]

    def test_calculate_missing_student(self, client):
        assert client.post("/api/risk/missing/calculate").status_code == 404

    def test_calculate_ensemble_mode(self, client):
        """Test the scoring mode query parameter."""
        student = create_student(client)

        data = client.post(f"/api/risk/{student['id']}/calculate?mode=ensemble").json()

        assert data["assessment"]["scoring_mode"] == "ensemble"

    def test_history_and_trend(self, client):
        """Test history ordering and trend after two calculations."""
        student = create_student(client, attendance_rate=40, cgpa=2.0)
        client.post(f"/api/risk/{student['id']}/calculate")
        client.patch(f"/api/students/{student['id']}/metrics", json={"attendance_rate": 99, "cgpa": 9.5})
        client.post(f"/api/risk/{student['id']}/calculate")

        history = client.get(f"/api/risk/{student['id']}/history?limit=5").json()
        assert history["total"] == 2
        newest, oldest = history["assessments"]
        assert newest["previous_score"] == oldest["risk_score"]
        assert newest["trend_direction"] == "improving"

        trend = client.get(f"/api/risk/{student['id']}/trend").json()
        assert trend["trend"] == "improving"
        assert trend["recent_scores"] == [newest["risk_score"], oldest["risk_score"]]

    def test_history_limit_validation(self, client):
        assert client.get("/api/risk/any/history?limit=0").status_code == 422

    def test_compare(self, client):
        """Test the three-way comparison."""
        student = create_student(client)

        data = client.get(f"/api/risk/{student['id']}/compare").json()

        assert set(data) == {"original", "ml", "holistic", "comparison"}

    def test_compare_all_with_weights(self, client):
        """Test the four-way comparison with custom ensemble weights."""
        student = create_student(client)

        response = client.post(
            f"/api/risk/{student['id']}/compare-all",
            json={"rule_based": 0.0, "ml_based": 0.0, "holistic": 0.0, "ml_holistic": 1.0},
        )

        data = response.json()
        assert response.status_code == 200
        assert abs(data["ensemble"]["score"] - data["algorithms"]["ml_holistic"]["risk_score"]) < 1e-9

    def test_compare_all_default_weights(self, client):
        student = create_student(client)

        data = client.post(f"/api/risk/{student['id']}/compare-all").json()

        assert data["ensemble"]["weights"]["ml_holistic"] == 0.4

    def test_enhanced(self, client):
        """Test the enhanced view does not store an assessment."""
        student = create_student(client)

        data = client.get(f"/api/risk/{student['id']}/enhanced").json()

        assert data["mode"] == "ensemble"
        assert client.get(f"/api/risk/{student['id']}/latest").json()["status"] == "pending"

    def test_read_only_views_missing_student(self, client):
        assert client.get("/api/risk/missing/compare").status_code == 404
        assert client.post("/api/risk/missing/compare-all").status_code == 404
        assert client.get("/api/risk/missing/enhanced").status_code == 404
        assert client.get("/api/risk/missing/trend").status_code == 404

    def test_recalculate_all_and_high_risk(self, client):
        """Test bulk recalculation followed by the high-risk list."""
        at_risk = create_student(
            client, cgpa=1.0, attendance_rate=30, assignment_completion_rate=10, test_score_average=20,
            login_frequency=0, class_participation_score=5, fee_payment_status="overdue",
        )
        create_student(client, student_number="2024-002", cgpa=9.5, attendance_rate=99)

        response = client.post("/api/risk/recalculate-all")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["failed"] == 0
        assert data["errors"] == []

        high = client.get("/api/risk/high-risk").json()
        assert high["total"] == 1
        assert high["assessments"][0]["student_id"] == at_risk["id"]

    def test_recalculate_all_runs_off_event_loop(self):
        """Test the blocking bulk handler is a plain function, so FastAPI runs it in the threadpool."""
        assert not inspect.iscoroutinefunction(risk_routes.recalculate_all_risks)

    def test_schedule_recalculate_all(self, client):
        """Test scheduling bulk recalculation on the worker."""
        with patch.object(risk_routes.recalculate_all_risks_task, "delay") as mock_delay:
            mock_delay.return_value.id = "task-123"
            response = client.post("/api/risk/recalculate-all/schedule")

        assert response.status_code == 202
        assert response.json()["status"] == "processing"
        assert response.json()["task_id"] == "task-123"
        mock_delay.assert_called_once_with()

    def test_schedule_recalculate_all_broker_down(self, client):
        """Test a broker failure is reported as unavailable."""
        with patch.object(risk_routes.recalculate_all_risks_task, "delay", side_effect=ConnectionError("refused")):
            response = client.post("/api/risk/recalculate-all/schedule")

        assert response.status_code == 503


class TestInterventionEndpoints:
    """Test intervention endpoints."""

    def plan(self, client, student_id, teacher_id, **overrides):
        payload = {
            "student_id": student_id,
            "teacher_id": teacher_id,
            "title": "Weekly tutoring",
            "type": "tutoring",
            "initial_risk_score": 80.0,
        }
        payload.update(overrides)
        return client.post("/api/interventions", json=payload)

    def test_intervention_lifecycle(self, client):
        """Test planning, progressing and completing an intervention."""
        student = create_student(client)
        teacher = create_teacher(client)

        response = self.plan(client, student["id"], teacher["id"])
        assert response.status_code == 201
        intervention = response.json()
        assert intervention["status"] == "planned"

        response = client.patch(f"/api/interventions/{intervention['id']}/status", json={"status": "in-progress"})
        assert response.json()["status"] == "in-progress"

        response = client.post(f"/api/interventions/{intervention['id']}/complete", json={"final_risk_score": 20.0})
        data = response.json()
        assert data["effectiveness"] == 75.0
        assert data["intervention"]["status"] == "completed"

        listing = client.get(f"/api/interventions/student/{student['id']}").json()
        assert listing["total"] == 1
        assert client.get(f"/api/interventions/teacher/{teacher['id']}").json()["total"] == 1

        teacher = client.get(f"/api/teachers/{teacher['id']}").json()
        assert teacher["interventions_completed"] == 1
        assert teacher["successful_interventions"] == 1
        assert teacher["success_rate"] == 100.0

    def test_plan_for_missing_student(self, client):
        teacher = create_teacher(client)
        assert self.plan(client, "missing", teacher["id"]).status_code == 404

    def test_plan_for_missing_teacher(self, client):
        student = create_student(client)

        response = self.plan(client, student["id"], "missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Teacher not found"

    def test_list_for_missing_teacher(self, client):
        response = client.get("/api/interventions/teacher/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Teacher not found"

    def test_invalid_status(self, client):
        student = create_student(client)
        teacher = create_teacher(client)
        intervention = self.plan(client, student["id"], teacher["id"]).json()

        response = client.patch(f"/api/interventions/{intervention['id']}/status", json={"status": "archived"})

        assert response.status_code == 400

    def test_complete_missing_intervention(self, client):
        response = client.post("/api/interventions/999/complete", json={"final_risk_score": 20.0})
        assert response.status_code == 404


class TestTeacherEndpoints:
    """Test teacher profile endpoints."""

    def test_create_teacher(self, client):
        data = create_teacher(client, subjects=["Physics", "Chemistry"])

        assert data["subjects"] == ["Physics", "Chemistry"]
        assert data["interventions_completed"] == 0
        assert data["success_rate"] == 0.0

    def test_create_duplicate_teacher(self, client):
        create_teacher(client)
        response = client.post("/api/teachers", json={"full_name": "Other", "teacher_number": "T-001"})
        assert response.status_code == 409

    def test_list_teachers(self, client):
        create_teacher(client)
        create_teacher(client, teacher_number="T-002", department="Arts")

        assert client.get("/api/teachers").json()["total"] == 2
        assert client.get("/api/teachers?department=Arts").json()["total"] == 1

    def test_get_missing_teacher(self, client):
        assert client.get("/api/teachers/missing").status_code == 404


class TestAdminEndpoints:
    """Test admin endpoints."""

    def test_statistics(self, client):
        """Test statistics on a fresh database."""
        create_teacher(client)
        create_student(client)

        data = client.get("/api/admin/statistics").json()

        assert data["total_students"] == 1
        assert data["total_teachers"] == 1
        assert data["pending_students"] == 1
        assert data["risk_levels"] == {"low": 0, "moderate": 0, "high": 0}

    def test_clear(self, client):
        """Test clearing all data."""
        student = create_student(client)
        client.post(f"/api/risk/{student['id']}/calculate")

        data = client.post("/api/admin/clear").json()

        assert data["students_deleted"] == 1
        assert data["risks_deleted"] == 1
        assert client.get("/api/admin/statistics").json()["total_students"] == 0
