"""
Tests for the MCP tool handlers, called directly without a transport
"""
import json

import pytest
from mcp import types

from campus_services.client import ToolCallError, parse_tool_result
from campus_services.errors import NotFoundError, PermissionDeniedError, ValidationError
from campus_services.server import create_app, create_server
from campus_services.tools import build_tools


@pytest.fixture
def tools(state):
    return build_tools(state)


async def call(tools, tool_name, /, **arguments):
    result = await tools[tool_name]["handler"](arguments)
    text = result[0].text
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def test_registry_names_match_descriptors(tools):
    assert set(tools) == {
        "register_student",
        "authenticate_user",
        "get_user_profile",
        "update_user_profile",
        "submit_request",
        "update_request_status",
        "list_requests",
        "get_request",
        "request_analytics",
        "export_requests_csv",
    }
    for name, entry in tools.items():
        assert entry["tool"].name == name
        assert entry["tool"].inputSchema["type"] == "object"


def test_create_app_keeps_state(state):
    app = create_app(state)
    assert app.state.campus is state
    assert create_server(state).name == "campus-services-server"


class TestUserTools:
    @pytest.mark.asyncio
    async def test_register_then_login(self, tools):
        profile = await call(
            tools,
            "register_student",
            name="Neha Rao",
            email="neha.r@college.edu",
            enrollment_number="CS2023042",
            password="Secret!1",
            confirm_password="Secret!1",
        )
        assert profile["role"] == "student"
        assert "password_hash" not in profile

        logged_in = await call(
            tools, "authenticate_user", identifier="CS2023042", role="student", password="Secret!1"
        )
        assert logged_in["id"] == profile["id"]

    @pytest.mark.asyncio
    async def test_register_without_enrollment_number(self, tools):
        with pytest.raises(ValidationError, match="enrollment_number"):
            await call(tools, "register_student", name="Neha Rao", email="neha.r@college.edu")

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, tools):
        with pytest.raises(NotFoundError):
            await call(tools, "authenticate_user", identifier="nobody@college.edu", role="staff")

    @pytest.mark.asyncio
    async def test_get_profile(self, tools):
        profile = await call(tools, "get_user_profile", user_id="st1")
        assert profile["name"] == "Prof. Anjali Gupta"

    @pytest.mark.asyncio
    async def test_user_edits_own_profile(self, tools):
        profile = await call(tools, "update_user_profile", actor_id="s1", department="Electronics")
        assert profile["department"] == "Electronics"
        assert profile["name"] == "Rahul Sharma"

    @pytest.mark.asyncio
    async def test_student_cannot_edit_someone_else(self, tools, state):
        with pytest.raises(PermissionDeniedError):
            await call(tools, "update_user_profile", actor_id="s1", user_id="st1", name="Hacked")
        assert state.directory.get("st1").name == "Prof. Anjali Gupta"

    @pytest.mark.asyncio
    async def test_admin_can_edit_anyone(self, tools):
        profile = await call(tools, "update_user_profile", actor_id="a1", user_id="st1", name="Dr. Anjali Gupta")
        assert profile["name"] == "Dr. Anjali Gupta"


class TestRequestTools:
    @pytest.mark.asyncio
    async def test_submit_takes_name_snapshot_from_directory(self, tools, state):
        request = await call(
            tools,
            "submit_request",
            actor_id="s1",
            service_type="Canteen Issue",
            description="Card machine down.",
            location="Main canteen",
        )

        assert request["student_id"] == "s1"
        assert request["student_name"] == "Rahul Sharma"
        assert request["status"] == "Submitted"

        await call(tools, "update_user_profile", actor_id="s1", name="Rahul Verma")
        assert state.store.get(request["id"]).student_name == "Rahul Sharma"

    @pytest.mark.asyncio
    async def test_staff_cannot_submit(self, tools, state):
        with pytest.raises(PermissionDeniedError):
            await call(tools, "submit_request", actor_id="st1", service_type="Other", description="x")
        assert len(state.store) == 3

    @pytest.mark.asyncio
    async def test_submit_empty_description(self, tools, state):
        with pytest.raises(ValidationError):
            await call(tools, "submit_request", actor_id="s1", service_type="Other", description="")
        assert len(state.store) == 3

    @pytest.mark.asyncio
    async def test_unknown_actor(self, tools):
        with pytest.raises(NotFoundError):
            await call(tools, "list_requests", actor_id="ghost")

    @pytest.mark.asyncio
    async def test_missing_actor(self, tools):
        with pytest.raises(ValidationError, match="actor_id"):
            await call(tools, "list_requests")

    @pytest.mark.asyncio
    async def test_student_cannot_update_status(self, tools, state):
        with pytest.raises(PermissionDeniedError):
            await call(tools, "update_request_status", actor_id="s1", request_id="req1", status="Resolved")
        assert state.store.get("req1").status == "Submitted"

    @pytest.mark.asyncio
    async def test_staff_update_status(self, tools):
        result = await call(
            tools, "update_request_status", actor_id="st1", request_id="req1", status="In Progress", remarks="On it"
        )
        assert result["old_status"] == "Submitted"
        assert result["status"] == "In Progress"
        assert result["remarks"] == "On it"

    @pytest.mark.asyncio
    async def test_blank_remarks_keep_previous(self, tools):
        result = await call(
            tools, "update_request_status", actor_id="a1", request_id="req3", status="Resolved", remarks="  "
        )
        assert result["remarks"] == "Collect from Admin block"

    @pytest.mark.asyncio
    async def test_update_unknown_request(self, tools):
        with pytest.raises(NotFoundError):
            await call(tools, "update_request_status", actor_id="st1", request_id="nonexistent-id", status="Resolved")

    @pytest.mark.asyncio
    async def test_list_is_scoped_by_role(self, tools):
        mine = await call(tools, "list_requests", actor_id="s1")
        everything = await call(tools, "list_requests", actor_id="st1")

        assert [r["id"] for r in mine["requests"]] == ["req1", "req3"]
        assert everything["count"] == 3
        assert [r["date"] for r in everything["requests"]] == ["2023-10-25", "2023-10-24", "2023-10-20"]

    @pytest.mark.asyncio
    async def test_list_filters(self, tools):
        result = await call(tools, "list_requests", actor_id="a1", status="All", search="priya")
        assert [r["id"] for r in result["requests"]] == ["req2"]

    @pytest.mark.asyncio
    async def test_student_cannot_get_other_students_request(self, tools):
        with pytest.raises(PermissionDeniedError):
            await call(tools, "get_request", actor_id="s1", request_id="req2")
        own = await call(tools, "get_request", actor_id="s1", request_id="req3")
        assert own["remarks"] == "Collect from Admin block"

    @pytest.mark.asyncio
    async def test_analytics_for_staff_only(self, tools):
        with pytest.raises(PermissionDeniedError):
            await call(tools, "request_analytics", actor_id="s1")

        summary = await call(tools, "request_analytics", actor_id="a1")
        assert summary["resolution_rate"] == 33.3
        assert summary["status_counts"] == {"Submitted": 1, "In Progress": 1, "Resolved": 1}

    @pytest.mark.asyncio
    async def test_reopen_reports_resolved_as_old_status(self, tools):
        result = await call(tools, "update_request_status", actor_id="st1", request_id="req3", status="Submitted")
        assert result["old_status"] == "Resolved"
        assert result["status"] == "Submitted"

    @pytest.mark.asyncio
    async def test_analytics_top_n(self, tools):
        summary = await call(tools, "request_analytics", actor_id="st1", top_n=1)
        assert len(summary["top_categories"]) == 1

        summary = await call(tools, "request_analytics", actor_id="st1", top_n="2")
        assert len(summary["top_categories"]) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("top_n", [0, -3, "abc"])
    async def test_analytics_rejects_bad_top_n(self, tools, top_n):
        with pytest.raises(ValidationError, match="top_n"):
            await call(tools, "request_analytics", actor_id="a1", top_n=top_n)

    def test_analytics_schema_requires_positive_top_n(self, tools):
        schema = tools["request_analytics"]["tool"].inputSchema
        assert schema["properties"]["top_n"]["minimum"] == 1

    @pytest.mark.asyncio
    async def test_csv_export_admin_only(self, tools):
        with pytest.raises(PermissionDeniedError):
            await call(tools, "export_requests_csv", actor_id="st1")

        report = await call(tools, "export_requests_csv", actor_id="a1")
        assert report.splitlines()[0].startswith("id,date,student_id")
        assert len(report.splitlines()) == 4


class TestParseToolResult:
    def test_json_payload(self):
        result = types.CallToolResult(content=[types.TextContent(type="text", text='{"count": 2}')])
        assert parse_tool_result(result) == {"count": 2}

    def test_plain_text_payload(self):
        result = types.CallToolResult(content=[types.TextContent(type="text", text="id,date\n")])
        assert parse_tool_result(result) == "id,date\n"

    def test_error_result_raises(self):
        result = types.CallToolResult(
            content=[types.TextContent(type="text", text="role 'student' may not do this")],
            isError=True,
        )
        with pytest.raises(ToolCallError, match="may not"):
            parse_tool_result(result)
