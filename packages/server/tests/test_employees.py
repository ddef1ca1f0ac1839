"""
Employee endpoint tests: CRUD, partial update rules and tenant isolation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func
from sqlmodel import select

from conftest import create_employee, create_team
from hrms_api.core.errors import NotFound
from hrms_api.models.employee import Employee
from hrms_api.models.employee_team import EmployeeTeam
from hrms_api.models.log import Log
from hrms_api.services import employees as employee_service


class TestCreateEmployee:
    async def test_create(self, client, acme):
        resp = await client.post(
            "/api/employees",
            json={"first_name": "Jane", "last_name": "Doe", "email": "jane@acme.com", "phone": "555-0100"},
            headers=acme["headers"],
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["first_name"] == "Jane"
        assert data["phone"] == "555-0100"
        assert data["organisation_id"] == acme["user"]["organisationId"]
        uuid.UUID(data["id"])

    async def test_required_fields(self, client, acme):
        resp = await client.post(
            "/api/employees",
            json={"first_name": "Jane", "last_name": ""},
            headers=acme["headers"],
        )
        assert resp.status_code == 400
        assert resp.json() == {"message": "First name, last name, and email are required"}

    async def test_client_cannot_choose_organisation(self, client, acme, globex):
        resp = await client.post(
            "/api/employees",
            json={
                "first_name": "Jane",
                "last_name": "Doe",
                "email": "jane@acme.com",
                "organisation_id": globex["user"]["organisationId"],
            },
            headers=acme["headers"],
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Validation error"

    async def test_create_is_audited(self, client, session, acme):
        emp = await create_employee(client, acme)
        entry = (
            await session.execute(select(Log).where(Log.action == "employee_created"))
        ).scalar_one()
        assert str(entry.organisation_id) == acme["user"]["organisationId"]
        assert str(entry.user_id) == acme["user"]["id"]
        assert entry.meta == {
            "employeeId": emp["id"],
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@acme.com",
        }


class TestReadEmployees:
    async def test_list_is_newest_first(self, client, session, acme):
        org_id = uuid.UUID(acme["user"]["organisationId"])
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i, name in enumerate(["Old", "Middle", "New"]):
            session.add(
                Employee(
                    organisation_id=org_id,
                    first_name=name,
                    last_name="Person",
                    email=f"{name.lower()}@acme.com",
                    created_at=base + timedelta(days=i),
                )
            )
        await session.commit()

        resp = await client.get("/api/employees", headers=acme["headers"])
        assert resp.status_code == 200
        assert [e["first_name"] for e in resp.json()] == ["New", "Middle", "Old"]

    async def test_list_includes_teams(self, client, acme):
        emp = await create_employee(client, acme)
        team = await create_team(client, acme, name="Platform")
        await client.post(
            f"/api/teams/{team['id']}/assign", json={"employeeId": emp["id"]}, headers=acme["headers"]
        )

        resp = await client.get("/api/employees", headers=acme["headers"])
        (listed,) = resp.json()
        assert listed["teams"] == [{"id": team["id"], "name": "Platform"}]

    async def test_get_detail_includes_team_membership(self, client, acme):
        emp = await create_employee(client, acme)
        team = await create_team(client, acme, name="Platform", description="Infra")
        await client.post(
            f"/api/teams/{team['id']}/assign", json={"employeeId": emp["id"]}, headers=acme["headers"]
        )

        resp = await client.get(f"/api/employees/{emp['id']}", headers=acme["headers"])
        assert resp.status_code == 200
        (membership,) = resp.json()["teams"]
        assert membership["id"] == team["id"]
        assert membership["description"] == "Infra"
        assert membership["assigned_at"]

    async def test_get_unknown(self, client, acme):
        resp = await client.get(f"/api/employees/{uuid.uuid4()}", headers=acme["headers"])
        assert resp.status_code == 404
        assert resp.json() == {"message": "Employee not found"}

    async def test_get_malformed_id(self, client, acme):
        resp = await client.get("/api/employees/not-a-uuid", headers=acme["headers"])
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "path.employee_id"


class TestUpdateEmployee:
    async def test_partial_update_keeps_omitted_fields(self, client, acme):
        emp = await create_employee(client, acme, phone="555-0100")
        resp = await client.put(
            f"/api/employees/{emp['id']}",
            json={"first_name": "Janet"},
            headers=acme["headers"],
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["first_name"] == "Janet"
        assert data["last_name"] == "Doe"
        assert data["email"] == "jane@acme.com"
        assert data["phone"] == "555-0100"

    async def test_empty_required_field_falls_back(self, client, acme):
        emp = await create_employee(client, acme)
        resp = await client.put(
            f"/api/employees/{emp['id']}",
            json={"first_name": "", "email": ""},
            headers=acme["headers"],
        )
        assert resp.json()["first_name"] == "Jane"
        assert resp.json()["email"] == "jane@acme.com"

    async def test_phone_can_be_cleared(self, client, acme):
        emp = await create_employee(client, acme, phone="555-0100")
        resp = await client.put(
            f"/api/employees/{emp['id']}", json={"phone": None}, headers=acme["headers"]
        )
        assert resp.json()["phone"] is None

    async def test_phone_can_be_set_to_empty_string(self, client, acme):
        emp = await create_employee(client, acme, phone="555-0100")
        resp = await client.put(
            f"/api/employees/{emp['id']}", json={"phone": ""}, headers=acme["headers"]
        )
        assert resp.status_code == 200
        assert resp.json()["phone"] == ""
        assert resp.json()["first_name"] == "Jane"

    async def test_update_is_audited(self, client, session, acme):
        emp = await create_employee(client, acme)
        await client.put(
            f"/api/employees/{emp['id']}", json={"last_name": "Smith"}, headers=acme["headers"]
        )
        entry = (
            await session.execute(select(Log).where(Log.action == "employee_updated"))
        ).scalar_one()
        assert entry.meta == {
            "employeeId": emp["id"],
            "updates": {"first_name": None, "last_name": "Smith", "email": None, "phone": None},
        }

    async def test_update_unknown(self, client, acme):
        resp = await client.put(
            f"/api/employees/{uuid.uuid4()}", json={"first_name": "X"}, headers=acme["headers"]
        )
        assert resp.status_code == 404


class TestDeleteEmployee:
    async def test_delete_removes_memberships(self, client, session, acme):
        emp = await create_employee(client, acme)
        team = await create_team(client, acme)
        await client.post(
            f"/api/teams/{team['id']}/assign", json={"employeeId": emp["id"]}, headers=acme["headers"]
        )

        resp = await client.delete(f"/api/employees/{emp['id']}", headers=acme["headers"])
        assert resp.status_code == 200
        assert resp.json() == {"message": "Employee deleted successfully"}

        gone = await client.get(f"/api/employees/{emp['id']}", headers=acme["headers"])
        assert gone.status_code == 404

        detail = await client.get(f"/api/teams/{team['id']}", headers=acme["headers"])
        assert detail.json()["employees"] == []
        listed = await client.get("/api/teams", headers=acme["headers"])
        assert listed.json()[0]["employees"] == []

        rows = (await session.execute(select(func.count()).select_from(EmployeeTeam))).scalar_one()
        assert rows == 0

    async def test_delete_audits_snapshot(self, client, session, acme):
        emp = await create_employee(client, acme, phone="555-0100")
        await client.delete(f"/api/employees/{emp['id']}", headers=acme["headers"])

        entry = (
            await session.execute(select(Log).where(Log.action == "employee_deleted"))
        ).scalar_one()
        assert entry.meta["employeeId"] == emp["id"]
        assert entry.meta["first_name"] == "Jane"
        assert entry.meta["phone"] == "555-0100"

    async def test_delete_twice(self, client, acme):
        emp = await create_employee(client, acme)
        await client.delete(f"/api/employees/{emp['id']}", headers=acme["headers"])
        resp = await client.delete(f"/api/employees/{emp['id']}", headers=acme["headers"])
        assert resp.status_code == 404

    async def test_delete_of_already_deleted_row_is_not_found(
        self, client, session, acme, monkeypatch
    ):
        """The loser of two racing deletes gets 404 and writes no audit entry."""
        emp = await create_employee(client, acme)
        stale = await session.get(Employee, uuid.UUID(emp["id"]))
        await client.delete(f"/api/employees/{emp['id']}", headers=acme["headers"])

        async def _loaded_before_delete(*args, **kwargs):
            return stale

        monkeypatch.setattr(employee_service, "_get_employee_or_404", _loaded_before_delete)
        with pytest.raises(NotFound):
            await employee_service.delete_employee(session, acme["identity"], stale.id)

        deleted = (
            await session.execute(
                select(func.count()).select_from(Log).where(Log.action == "employee_deleted")
            )
        ).scalar_one()
        assert deleted == 1


class TestTenantIsolation:
    async def test_other_org_cannot_see_employee(self, client, acme, globex):
        emp = await create_employee(client, acme)

        listed = await client.get("/api/employees", headers=globex["headers"])
        assert listed.json() == []

        resp = await client.get(f"/api/employees/{emp['id']}", headers=globex["headers"])
        assert resp.status_code == 404
        assert resp.json() == {"message": "Employee not found"}

    async def test_other_org_cannot_modify_employee(self, client, acme, globex):
        emp = await create_employee(client, acme)

        upd = await client.put(
            f"/api/employees/{emp['id']}", json={"first_name": "Hacked"}, headers=globex["headers"]
        )
        assert upd.status_code == 404
        dele = await client.delete(f"/api/employees/{emp['id']}", headers=globex["headers"])
        assert dele.status_code == 404

        still = await client.get(f"/api/employees/{emp['id']}", headers=acme["headers"])
        assert still.json()["first_name"] == "Jane"
