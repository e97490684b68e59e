"""Session domain services: roster, message codec and event routing.

This package contains transport-free logic that the Socket.IO handlers
and HTTP routes call into, keeping Flask concerns separated from the
session protocol itself.
"""
