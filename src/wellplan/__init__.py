"""Wellplan - recurring wellness activity planner."""
