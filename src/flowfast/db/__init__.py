"""Persistence layer for the FlowFast coaching app."""
