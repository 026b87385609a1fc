"""
Request and response envelopes of the REST interface.

Entity payloads are typed ``Any`` on the way in: their shape is checked by the
model layer so that a malformed payload produces the usual error descriptor.
"""

from typing import Any, Dict, List

from pydantic import BaseModel


class AgentEnvelope(BaseModel):
    agent: Any = None


class GroupEnvelope(BaseModel):
    group: Any = None


class MessageResponse(BaseModel):
    message: str


class AgentStatesResponse(BaseModel):
    agent_states: List[str]


class IndicatorNamesResponse(BaseModel):
    indicator_names: List[str]


class AgentResponse(BaseModel):
    agent: Dict[str, Any]


class AgentListResponse(BaseModel):
    agents: List[Dict[str, Any]]


class GroupResponse(BaseModel):
    group: Dict[str, Any]


class GroupListResponse(BaseModel):
    groups: List[Dict[str, Any]]


class IndicatorListResponse(BaseModel):
    indicators: List[Dict[str, Any]]


class ErrorResponse(BaseModel):
    errors: List[Dict[str, Any]]
