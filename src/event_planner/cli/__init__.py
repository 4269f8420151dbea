"""
Console front-end: entrypoint, composition root and slash commands.
"""
