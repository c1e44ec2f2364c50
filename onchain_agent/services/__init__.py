"""
Service implementations for the Onchain Agent system.

These services hold configuration, network lookups, tool execution
callbacks and the agent itself.
"""

from onchain_agent.services.agent import *
from onchain_agent.services.callbacks import *
from onchain_agent.services.networks import *
from onchain_agent.services.settings import *
