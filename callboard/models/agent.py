"""Agent entity: a call-center agent belonging to one group."""

from ..core.model import Model
from ..core.schema import Field, Presence, Schema


class Agent(Model):
    schema = Schema([
        Field("name", validations=[Presence("Name is required!")]),
        Field("status"),
        Field("groupId", validations=[Presence("Group-Id is required!")]),
    ])
