"""Platform domain services: score persistence, leaderboards, player tokens.

HTTP routes and socket handlers import from here, keeping transport
concerns separated from the record-keeping rules.
"""
