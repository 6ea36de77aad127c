"""Discovery app package.

Search for venues and artists by date, money and genre, and the nightly
matching job that pairs open dates with date needs.
"""
