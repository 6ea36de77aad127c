"""Messaging app package.

One conversation per artist/venue pair. Offers are negotiated inside a
conversation and every offer or booking state change posts a system
message into the thread.
"""
