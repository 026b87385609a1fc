"""
Group entity tests: indicator cascade and relationships.
"""

import asyncio
from unittest.mock import patch

import pytest

from callboard.core.errors import InvalidArguments, NotFound, ValidationFailed
from callboard.core.model import Model
from callboard.models import INDICATOR_NAMES, Agent, Group, Indicator


@pytest.mark.asyncio
async def test_create_requires_a_name(db):
    with pytest.raises(ValidationFailed) as exc_info:
        await Group.create({})

    assert exc_info.value.serialize() == [
        {"title": "Validation failed."},
        {"name": ["Name is required!"]},
    ]
    assert await Indicator.all() == []


@pytest.mark.asyncio
async def test_create_adds_one_indicator_per_catalog_name(db):
    group = await Group.create({"name": "Support"})

    indicators = await Indicator.where({"groupId": group.id})
    assert len(indicators) == len(INDICATOR_NAMES) == 30
    assert sorted(indicator.name for indicator in indicators) == sorted(INDICATOR_NAMES)
    assert all(0 <= indicator.value < 1000 for indicator in indicators)


@pytest.mark.asyncio
async def test_indicators_of_different_groups_stay_apart(db):
    first = await Group.create({"name": "First"})
    second = await Group.create({"name": "Second"})

    assert len(await first.indicators()) == 30
    assert len(await second.indicators()) == 30
    assert len(await Indicator.all()) == 60


@pytest.mark.asyncio
async def test_destroy_removes_indicators_but_keeps_agents(db):
    group = await Group.create({"name": "Support"})
    agent = await Agent.create({"name": "Alice", "groupId": group.id})

    await group.destroy()

    assert await Indicator.where({"groupId": group.id}) == []
    remaining = await Agent.find(agent.id)
    assert remaining.groupId == group.id


@pytest.mark.asyncio
async def test_destroy_leaves_other_groups_alone(db):
    doomed = await Group.create({"name": "Doomed"})
    kept = await Group.create({"name": "Kept"})

    await doomed.destroy()

    assert len(await kept.indicators()) == 30
    assert [group.id for group in await Group.all()] == [kept.id]


@pytest.mark.asyncio
async def test_agents_are_matched_by_group_id(db):
    group = await Group.create({"name": "Support"})
    other = await Group.create({"name": "Sales"})
    await Agent.create({"name": "Alice", "groupId": str(group.id)})
    await Agent.create({"name": "Bob", "groupId": group.id})
    await Agent.create({"name": "Carol", "groupId": other.id})

    agents = await group.agents()
    assert [agent.name for agent in agents] == ["Alice", "Bob"]


@pytest.mark.asyncio
async def test_update_does_not_touch_indicators(db):
    group = await Group.create({"name": "Support"})
    await group.update({"name": "Helpdesk"})

    assert (await Group.find(group.id)).name == "Helpdesk"
    assert len(await group.indicators()) == 30


@pytest.mark.asyncio
async def test_failing_indicator_create_fails_group_create_without_rollback(db):
    original_create = Indicator.create
    calls = []

    async def create_failing_third(args=None):
        calls.append(args)
        if len(calls) == 3:
            raise InvalidArguments("Indicator could not be created.")
        return await original_create(args)

    with patch.object(Indicator, "create", new=create_failing_third):
        with pytest.raises(InvalidArguments, match="Indicator could not be created."):
            await Group.create({"name": "Support"})
        # Let the remaining sibling creates finish
        await asyncio.sleep(0)

    groups = await Group.all()
    assert [group.name for group in groups] == ["Support"]
    assert len(await groups[0].indicators()) == len(INDICATOR_NAMES) - 1


@pytest.mark.asyncio
async def test_failing_indicator_destroy_fails_group_destroy_without_rollback(db):
    group = await Group.create({"name": "Support"})
    calls = []

    async def destroy_failing_third(indicator):
        calls.append(indicator.id)
        if len(calls) == 3:
            raise NotFound("Indicator doesn't exist in store anymore.")
        return await Model.destroy(indicator)

    with patch.object(Indicator, "destroy", new=destroy_failing_third):
        with pytest.raises(NotFound, match="Indicator doesn't exist in store anymore."):
            await group.destroy()
        await asyncio.sleep(0)

    with pytest.raises(NotFound):
        await Group.find(group.id)

    remaining = await Indicator.where({"groupId": group.id})
    assert [indicator.id for indicator in remaining] == [calls[2]]
