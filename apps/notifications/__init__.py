"""
Web push notifications for Newsdesk.

Browser subscriptions and editor-triggered fan-out via pywebpush.
"""
