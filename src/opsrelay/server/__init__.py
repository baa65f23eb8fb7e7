"""WebSocket server module for opsrelay.

Dispatches the three relay endpoints over shared model and executor
plumbing.
"""
