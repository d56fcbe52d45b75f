"""chat_ttl: sessões de chat com TTL no Redis e listener de expiração."""

__version__ = "0.1.0"
