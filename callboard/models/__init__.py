from .agent import Agent
from .catalogs import AGENT_STATES, INDICATOR_NAMES
from .group import Group
from .indicator import Indicator

__all__ = ["Agent", "Group", "Indicator", "AGENT_STATES", "INDICATOR_NAMES"]
