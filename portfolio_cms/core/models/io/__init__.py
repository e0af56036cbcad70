"""
I/O models for API requests and responses.

These pydantic schemas define the contract between the API and its clients;
database entities never leave the server directly.
"""
