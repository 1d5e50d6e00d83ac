"""
vidshare - a video-sharing backend.

Accounts, videos and comments over HTTP, with stateless cookie sessions and
owner-only mutation of every resource.
"""

__version__ = "0.1.0"
