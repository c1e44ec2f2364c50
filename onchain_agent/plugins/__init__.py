"""
Plugin system for the Onchain Agent.

This package provides the provider registry, the base plugin and tool
classes, plugin discovery, and the bundled wallet and swap plugins.
"""
