"""
Shared authentication core.

Everything both services need to agree on lives here: the claims carried in
a token, how tokens are signed and verified, how the `Authorization` header
is parsed, and the error types the HTTP layer maps to status codes.
"""
