"""
auth_platform package

Two FastAPI services sharing one JWT authentication core:

- `auth_service`: registration, login and user records
- `chat_service`: group chats and messages behind the bearer-token gate
- `core`: claims model, token issuing/verification, error taxonomy and
  shared configuration used by both services
"""
