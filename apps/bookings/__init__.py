"""Bookings app package.

Offers negotiated inside conversations, first-come instant gig posts and
the confirmed bookings both produce. Every state change runs in one
transaction through the command handlers, and the database rejects a
second active booking for the same artist and date.
"""
