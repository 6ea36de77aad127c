"""Users app package.

Accounts for the two sides of the marketplace. Every user logs in with an
email address and carries a role: an artist who plays gigs or a venue that
books them. Staff accounts may have no marketplace role.
"""
