from .identity import IdentityLoader, anonymous_identity, install_identity_loader, proxy_header_identity

__all__ = [
    "IdentityLoader",
    "anonymous_identity",
    "install_identity_loader",
    "proxy_header_identity",
]
