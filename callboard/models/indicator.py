"""Indicator entity: one named metric value of a group."""

from ..core.model import Model
from ..core.schema import Field, Presence, Schema


class Indicator(Model):
    schema = Schema([
        Field("name", validations=[Presence("Name is required!")]),
        Field("value"),
        Field("groupId", validations=[Presence("Group-Id is required!")]),
    ])
