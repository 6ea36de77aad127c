"""Availability app package.

Artists publish the dates they can play (open dates) and venues publish the
dates they need filled (date needs). Bookings flip these records to
booked/filled and back again on cancellation.
"""
