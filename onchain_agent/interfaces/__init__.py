"""
Abstract interfaces for the Onchain Agent system.

These interfaces define the contracts that concrete implementations
must adhere to, following the Dependency Inversion Principle.

This package contains:
- Plugin and tool interfaces
- Provider interfaces for network-backed services and the LLM
- Service interfaces for tool execution callbacks
"""
