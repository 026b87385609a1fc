#!/usr/bin/env python3
"""
Seed the development database with random groups and agents.

Removes the existing development database first. Every group gets its full set
of indicators through Group.create.
"""

import argparse
import asyncio
import random
import string
import sys
from pathlib import Path

# Add the project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from callboard.core.config import get_environment
from callboard.core.db import close_db, init_db
from callboard.core.errors import ConfigurationError, ModelError
from callboard.models import AGENT_STATES, Agent, Group


def random_string(length: int) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


async def create_agents(group: Group, agent_count: int):
    agents = await asyncio.gather(*(
        Agent.create({
            "name": random_string(10),
            "status": random.choice(AGENT_STATES),
            "groupId": group.id,
        })
        for _ in range(agent_count)
    ))
    for agent in agents:
        print(f"Created agent {agent.id} - {agent.name} in group {group.id}")


async def create_group(agent_count: int):
    group = await Group.create({"name": random_string(10)})
    print(f"Created group {group.id} - {group.name}.")
    await create_agents(group, agent_count)


async def seed(group_count: int, agent_count: int, env: str):
    db_path = Path(get_environment(env)["db"])
    if db_path.exists():
        db_path.unlink()

    db = await init_db(env)
    try:
        await asyncio.gather(*(create_group(agent_count) for _ in range(group_count)))
    finally:
        await close_db(db)

    print("\nDatabase saved.")


def main():
    parser = argparse.ArgumentParser(description="Seed the database with random groups and agents")
    parser.add_argument("--groups", type=int, default=200, help="Number of groups to create")
    parser.add_argument("--agents", type=int, default=50, help="Number of agents per group")
    parser.add_argument("--env", default="development", help="Environment whose database is seeded")
    args = parser.parse_args()

    try:
        asyncio.run(seed(args.groups, args.agents, args.env))
    except ModelError as e:
        print(f"\nerror : {e.serialize()}")
        sys.exit(1)
    except ConfigurationError as e:
        print(f"\nerror : {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
