"""
Domain models for the Onchain Agent system.

This package contains the value types shared by plugins, providers,
tools and the agent.
"""

from onchain_agent.domains.errors import *
from onchain_agent.domains.execution import *
from onchain_agent.domains.networks import *
