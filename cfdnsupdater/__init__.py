"""Keep Cloudflare A and AAAA records in sync with the current public IP address."""

__version__ = "1.1.0"
__all__ = ["__version__"]