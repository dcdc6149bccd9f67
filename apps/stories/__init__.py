"""
Web stories app for Newsdesk.

Tap-through visual stories made of ordered image slides.
"""
