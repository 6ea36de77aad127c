"""Notifications app package.

Turns booking domain events into in-app notifications and emails, and
computes the unread summary shown in the client header.
"""
