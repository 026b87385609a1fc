"""
Fixed catalogs of agent states and indicator names.
"""

# Every state an agent can report
AGENT_STATES = [
    "free",
    "busy",
    "refinish",
    "reserved",
    "break",
    "logout",
    "groupBlocked",
]

# One indicator per name is created for every new group
INDICATOR_NAMES = [
    "CallsTotal",
    "CallsConnecting",
    "CallsInProgress",
    "CallsWaiting",
    "CallsMaxWait",
    "ServiceLevel_00",
    "Availability_00",
    "AverageHandlingTimeInSec",
    "AverageHandlingTimeSinceMidnight",
    "AverageWrapUpTime",
    "AverageWrapUpTime_00",
    "TimeUntilCallsHandledInboundSinceMidnight",
    "TimeUntilCallsAbortedByCallerInboundSinceMidnight",
    "AvailableTimeSinceMidnight",
    "CallsSinceMidnight",
    "HandledCallsSinceMidnight",
    "AbandonedCallsInRealQueueSinceMidnight",
    "WTimeInRealQueueSinceMidnight",
    "CallsLessThanXSecInboundSinceMidnight",
    "TakeOversFromThisGroupInboundSinceMidnight",
    "AgentsFree",
    "AgentsFreeWithoutLocallyBusy",
    "AgentsLocallyBusy",
    "AgentsRefinish",
    "AgentsBreak",
    "AgentsProductiveBreak",
    "AgentsReserved",
    "AgentsBusy",
    "AgentsLoggedIn",
    "OpenResubmissions",
]
