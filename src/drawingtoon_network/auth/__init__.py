"""Authentication strategies applied to outbound request headers."""
from .api_key import APIKeyAuth
from .base import AuthStrategy
from .basic import BasicAuth
from .bearer import BearerAuth

__all__ = ["AuthStrategy", "APIKeyAuth", "BasicAuth", "BearerAuth"]
