"""Profiles app package.

Public-facing profiles for both marketplace roles: the artist's act (genres,
minimum price, service radius) and the venue's room (budget, capacity,
preferred genres). Discovery and matching read these profiles.
"""
