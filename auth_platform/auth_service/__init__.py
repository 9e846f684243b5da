"""
auth_service package

Registration, login and user records for the platform.

- FastAPI application (`main.py`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Password hashing, registration and token issuing (`auth.py`)
- Pydantic schemas (`schemas.py`)
"""
