"""
eazycontroller — remote control for a computer's audio mixer and media players.

A small aiohttp server that exposes per-app volume, output devices and the
OS media transport sessions over a WebSocket, and pushes "now playing"
changes to every connected browser.
"""

__version__ = "0.3.0"
