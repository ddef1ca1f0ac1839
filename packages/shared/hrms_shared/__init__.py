"""Pydantic schemas shared by the HRMS server and its API clients."""
