"""
Evex terminal client: browse, register for and manage university events
against the Evex REST backend.
"""
