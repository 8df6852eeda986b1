"""Shared test fixtures and fakes for pyembedkit tests."""
