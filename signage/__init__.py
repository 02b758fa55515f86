"""
Signage CMS.

Flask service for digital-signage layouts: the Layout aggregate with its
regions, playlists, widgets, tags, campaigns and permissions, plus OAuth2
application registration for API clients.
"""

__version__ = '0.1.0'
