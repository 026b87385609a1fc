"""
REST routes over agents, groups and indicators, mounted under /api.

Failed lookups answer 404, every other failed entity operation 400, both with
the error descriptor as body: ``{"errors": [{"title": ...}, {...}]}``.
"""

import asyncio
from typing import Any, Dict

from fastapi import APIRouter, Body, Request, Response
from fastapi.responses import JSONResponse

from ..core.errors import ModelError
from ..models import AGENT_STATES, INDICATOR_NAMES, Agent, Group, Indicator
from .schemas import (
    AgentEnvelope,
    AgentListResponse,
    AgentResponse,
    AgentStatesResponse,
    ErrorResponse,
    GroupEnvelope,
    GroupListResponse,
    GroupResponse,
    IndicatorListResponse,
    IndicatorNamesResponse,
    MessageResponse,
)

router = APIRouter()


def _error_response(status_code: int, error: ModelError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": error.serialize()})


def _unwrap(envelope_cls, payload: Any, key: str) -> Any:
    """Take the entity payload out of a request body, None unless the body is an object."""
    if not isinstance(payload, dict):
        return None
    return getattr(envelope_cls.model_validate(payload), key)


async def _group_with_relations(group: Group) -> Dict[str, Any]:
    """Serialize a group together with the ids of its agents and indicators."""
    agents, indicators = await asyncio.gather(group.agents(), group.indicators())

    body = group.serialize_attributes()
    body["agents"] = [agent.id for agent in agents]
    body["indicators"] = [indicator.id for indicator in indicators]
    return body


@router.get("/", response_model=MessageResponse)
async def api_root():
    return MessageResponse(message="Success")


@router.get("/agent_states", response_model=AgentStatesResponse)
async def list_agent_states():
    return AgentStatesResponse(agent_states=AGENT_STATES)


@router.get("/indicator_names", response_model=IndicatorNamesResponse)
async def list_indicator_names():
    return IndicatorNamesResponse(indicator_names=INDICATOR_NAMES)


# Agents

@router.get("/agents", response_model=AgentListResponse)
async def list_agents():
    agents = await Agent.all()
    return AgentListResponse(agents=[agent.serialize_attributes() for agent in agents])


@router.post("/agents", response_model=AgentResponse, status_code=201, responses={400: {"model": ErrorResponse}})
async def create_agent(request: Request, response: Response, payload: Any = Body(None)):
    try:
        agent = await Agent.create(_unwrap(AgentEnvelope, payload, "agent"))
    except ModelError as e:
        return _error_response(400, e)

    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{agent.id}"
    return AgentResponse(agent=agent.serialize_attributes())


@router.get("/agents/{record_id}", response_model=AgentResponse, responses={404: {"model": ErrorResponse}})
async def get_agent(record_id: str):
    try:
        agent = await Agent.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    return AgentResponse(agent=agent.serialize_attributes())


@router.patch("/agents/{record_id}")
async def update_agent(record_id: str, payload: Any = Body(None)):
    try:
        agent = await Agent.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    try:
        await agent.update(_unwrap(AgentEnvelope, payload, "agent"))
    except ModelError as e:
        return _error_response(400, e)

    return "OK"


@router.delete("/agents/{record_id}")
async def delete_agent(record_id: str):
    try:
        agent = await Agent.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    try:
        await agent.destroy()
    except ModelError as e:
        return _error_response(400, e)

    return "OK"


# Groups

@router.get("/groups", response_model=GroupListResponse)
async def list_groups():
    groups = await Group.all()
    bodies = await asyncio.gather(*(_group_with_relations(group) for group in groups))
    return GroupListResponse(groups=list(bodies))


@router.post("/groups", response_model=GroupResponse, status_code=201, responses={400: {"model": ErrorResponse}})
async def create_group(request: Request, response: Response, payload: Any = Body(None)):
    try:
        group = await Group.create(_unwrap(GroupEnvelope, payload, "group"))
    except ModelError as e:
        return _error_response(400, e)

    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{group.id}"
    return GroupResponse(group=group.serialize_attributes())


@router.get("/groups/{record_id}", response_model=GroupResponse, responses={404: {"model": ErrorResponse}})
async def get_group(record_id: str):
    try:
        group = await Group.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    return GroupResponse(group=await _group_with_relations(group))


@router.patch("/groups/{record_id}")
async def update_group(record_id: str, payload: Any = Body(None)):
    try:
        group = await Group.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    try:
        await group.update(_unwrap(GroupEnvelope, payload, "group"))
    except ModelError as e:
        return _error_response(400, e)

    return "OK"


@router.delete("/groups/{record_id}")
async def delete_group(record_id: str):
    try:
        group = await Group.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    try:
        await group.destroy()
    except ModelError as e:
        return _error_response(400, e)

    return "OK"


@router.get("/groups/{record_id}/agents", response_model=AgentListResponse)
async def list_group_agents(record_id: str):
    try:
        group = await Group.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    agents = await group.agents()
    return AgentListResponse(agents=[agent.serialize_attributes() for agent in agents])


@router.get("/groups/{record_id}/indicators", response_model=IndicatorListResponse)
async def list_group_indicators(record_id: str):
    try:
        group = await Group.find(record_id)
    except ModelError as e:
        return _error_response(404, e)

    indicators = await group.indicators()
    return IndicatorListResponse(indicators=[indicator.serialize_attributes() for indicator in indicators])


# Indicators

@router.get("/indicators", response_model=IndicatorListResponse)
async def list_indicators():
    indicators = await Indicator.all()
    return IndicatorListResponse(indicators=[indicator.serialize_attributes() for indicator in indicators])
