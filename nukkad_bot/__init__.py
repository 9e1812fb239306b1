"""WhatsApp front-end for Nukkad Fabrics wholesale."""

__version__ = "0.1.0"
