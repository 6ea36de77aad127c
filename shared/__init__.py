"""
Shared kernel for the VenueMenu apps.

Domain errors, the event recorder and value object bases, the unit of
work and the message bus, and the API exception handler.
"""
