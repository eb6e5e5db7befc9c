from .client import IdentityClaims, IdentityClient

__all__ = ["IdentityClaims", "IdentityClient"]
