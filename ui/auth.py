import os
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

basic_security = HTTPBasic()


def _expected_credentials():
    return (
        os.environ.get("LIFE_API_USERNAME", "admin"),
        os.environ.get("LIFE_API_PASSWORD", "life"),
    )


def verify_basic_auth(credentials: HTTPBasicCredentials = Depends(basic_security)):
    username, password = _expected_credentials()
    username_ok = secrets.compare_digest(credentials.username.encode(), username.encode())
    password_ok = secrets.compare_digest(credentials.password.encode(), password.encode())
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
