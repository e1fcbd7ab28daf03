"""Thin clients for the services codeanswer talks to."""
