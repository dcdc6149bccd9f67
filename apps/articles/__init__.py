"""
Articles app for Newsdesk.

Provides article storage, editing, promotion rules and the public read API.
"""
