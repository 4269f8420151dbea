"""
Connectors drive the app from the outside (currently the interactive console).
"""
