"""Rack health monitor.

Classifies server health per rack, records deduplicated incidents and
requests replacements for unhealthy servers.
"""
