"""HTTP API for the FlowFast coaching app."""
