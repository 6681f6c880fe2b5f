import pytest

from browser_agent.controller import Controller
from browser_agent.models import ActionRequest, CaptureResult
from browser_agent.registry import ACTION_SPECS, ActionRegistry
from conftest import make_element


def test_registry_exposes_exactly_five_actions(session):
    registry = ActionRegistry(Controller(session))

    assert registry.names == ["take_screenshot", "smart_click", "smart_type", "smart_scroll", "navigate"]


def test_tool_schemas_use_wire_names_and_optional_fields(session):
    tools = {t["function"]["name"]: t for t in ActionRegistry(Controller(session)).tools()}

    click = tools["smart_click"]
    assert click["type"] == "function"
    params = click["function"]["parameters"]
    assert params["type"] == "object"
    assert set(params["properties"]) == {"selector", "text", "x", "y", "waitTime"}
    assert not params.get("required")

    assert set(tools["take_screenshot"]["function"]["parameters"]["properties"]) == {"maxElements", "quality"}
    assert set(tools["smart_type"]["function"]["parameters"]["properties"]) == {
        "selector", "text", "clearFirst", "typingDelay",
    }
    assert "up" in str(tools["smart_scroll"]["function"]["parameters"])


def test_every_spec_has_description():
    for spec in ACTION_SPECS:
        assert spec.description
        assert spec.to_tool()["function"]["description"] == spec.description


@pytest.mark.asyncio
async def test_dispatch_maps_camel_case_arguments(session, page):
    page.selectors = {"#username"}
    registry = ActionRegistry(Controller(session))

    result = await registry.dispatch(ActionRequest(
        name="smart_type",
        arguments={"selector": "#username", "text": "tomsmith", "clearFirst": False, "typingDelay": 10},
    ))

    assert result == 'Successfully typed "tomsmith" into #username with delay 10ms'
    assert "fill" not in page.call_names()


@pytest.mark.asyncio
async def test_dispatch_screenshot_returns_structured_result(session, page):
    page.elements = [make_element()]
    registry = ActionRegistry(Controller(session))

    result = await registry.dispatch(ActionRequest(name="take_screenshot", arguments={"maxElements": 3}))

    assert isinstance(result, CaptureResult)
    assert ("evaluate", 3) in page.calls


@pytest.mark.asyncio
async def test_dispatch_unknown_action_returns_message(session, page):
    result = await ActionRegistry(Controller(session)).dispatch(ActionRequest(name="delete_everything"))

    assert result.startswith("Unknown action: delete_everything")
    assert page.calls == []


@pytest.mark.asyncio
async def test_dispatch_rejects_direction_outside_enum(session, page):
    result = await ActionRegistry(Controller(session)).dispatch(
        ActionRequest(name="smart_scroll", arguments={"direction": "diagonal"})
    )

    assert result.startswith("Invalid arguments for smart_scroll")
    assert page.calls == []


@pytest.mark.asyncio
async def test_dispatch_accepts_null_arguments(session, page):
    result = await ActionRegistry(Controller(session)).dispatch(
        ActionRequest(name="smart_click", arguments={"selector": None, "text": None, "x": None, "y": None})
    )

    assert result == "No valid click parameters provided"


@pytest.mark.asyncio
async def test_dispatch_rejects_negative_element_cap(session, page):
    page.elements = [make_element(text=str(i)) for i in range(10)]
    registry = ActionRegistry(Controller(session))

    result = await registry.dispatch(ActionRequest(name="take_screenshot", arguments={"maxElements": -2}))

    assert isinstance(result, str)
    assert result.startswith("Invalid arguments for take_screenshot")
    assert page.calls == []


@pytest.mark.asyncio
async def test_dispatch_rejects_quality_out_of_range(session, page):
    registry = ActionRegistry(Controller(session))

    result = await registry.dispatch(ActionRequest(name="take_screenshot", arguments={"quality": 150}))

    assert result.startswith("Invalid arguments for take_screenshot")
    assert page.calls == []


def test_screenshot_schema_declares_bounds(session):
    tools = {t["function"]["name"]: t for t in ActionRegistry(Controller(session)).tools()}
    props = tools["take_screenshot"]["function"]["parameters"]["properties"]

    assert "'minimum': 1" in str(props["maxElements"])
    assert "'maximum': 100" in str(props["quality"])


@pytest.mark.asyncio
async def test_dispatch_integer_coordinates_keep_integer_wording(session, page):
    result = await ActionRegistry(Controller(session)).dispatch(
        ActionRequest(name="smart_click", arguments={"x": 120, "y": 45})
    )

    assert result == "Clicked successfully using coordinates: (120, 45)"
    assert ("mouse.click", 120.0, 45.0) in page.calls


@pytest.mark.asyncio
async def test_dispatch_fractional_coordinates_are_preserved(session, page):
    result = await ActionRegistry(Controller(session)).dispatch(
        ActionRequest(name="smart_click", arguments={"x": 120.5, "y": 45})
    )

    assert result == "Clicked successfully using coordinates: (120.5, 45)"
