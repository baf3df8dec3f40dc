"""streamadm - admin tooling for log-streaming clusters."""

__version__ = "0.1.0"

# Public API - resolved lazily so importing the package stays cheap
def __getattr__(name: str):
    """Lazy import of the public client types."""
    if name == "RecoveryClient":
        from streamadm.recovery.client import RecoveryClient
        return RecoveryClient
    elif name == "AdminAPI":
        from streamadm.admin.client import AdminAPI
        return AdminAPI
    elif name == "ConnectionConfig":
        from streamadm.config import ConnectionConfig
        return ConnectionConfig
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "RecoveryClient",
    "AdminAPI",
    "ConnectionConfig",
]
