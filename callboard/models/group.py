"""
Group entity and its relationships to agents and indicators.

Creating a group creates one indicator per catalog name; destroying a group
destroys its indicators. Agents are left in place on destroy. Neither cascade
is atomic: the group row is written (or removed) first and is not rolled back
when an indicator operation fails.
"""

import asyncio
import random
from typing import List

from ..core.model import Model, ModelHooks
from ..core.schema import Field, Presence, Schema
from .agent import Agent
from .catalogs import INDICATOR_NAMES
from .indicator import Indicator


async def create_indicators(group: "Group"):
    """Create one indicator per catalog name for the group, all outstanding at once."""
    await asyncio.gather(*(
        Indicator.create({
            "name": name,
            "value": random.randrange(1000),
            "groupId": group.id,
        })
        for name in INDICATOR_NAMES
    ))


async def destroy_indicators(group: "Group"):
    """Destroy every indicator referencing the group."""
    indicators = await Indicator.where({"groupId": group.id})
    await asyncio.gather(*(indicator.destroy() for indicator in indicators))


class Group(Model):
    schema = Schema([
        Field("name", validations=[Presence("Name is required!")]),
    ])
    hooks = ModelHooks(after_create=create_indicators, after_destroy=destroy_indicators)

    async def agents(self) -> List[Agent]:
        """Fetch all agents belonging to this group."""
        return await Agent.where({"groupId": self.id})

    async def indicators(self) -> List[Indicator]:
        """Fetch all indicators belonging to this group."""
        return await Indicator.where({"groupId": self.id})
