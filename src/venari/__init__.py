"""Venari: a Discord bot that sets up and archives puzzle-hunt channels.

``/hunt`` creates a text channel, a voice channel and a role for a hunt in
the Active category; ``/archive`` moves it to the Archive category.
"""
