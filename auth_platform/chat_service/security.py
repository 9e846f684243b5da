"""
Bearer-token gate for the chat service. Every /chat route sits behind it.
"""
from ..core.gate import AuthGate
from .config import get_settings

gate = AuthGate(get_settings().jwt_secret)
