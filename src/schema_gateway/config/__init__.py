from .settings import DatabaseSettings, GatewaySettings

__all__ = ["DatabaseSettings", "GatewaySettings"]
