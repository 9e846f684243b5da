"""
Bearer-token gate for the auth service's protected routes.
"""
from ..core.gate import AuthGate
from .config import get_settings

gate = AuthGate(get_settings().jwt_secret)
