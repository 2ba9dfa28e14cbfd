"""Application state and the ports the task core depends on."""
