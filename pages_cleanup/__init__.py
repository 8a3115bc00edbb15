"""pages-cleanup: retention policy for Cloudflare Pages deployments."""

__version__ = "0.1.0"
