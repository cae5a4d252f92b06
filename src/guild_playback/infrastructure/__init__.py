"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, guards)
- Audio (yt-dlp metadata lookup, search and playlist expansion)
- Spotify (catalog client on httpx)
"""
