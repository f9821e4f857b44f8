"""
Unit Tests for Auth Schemas
"""
import pytest
from pydantic import ValidationError

from app.schemas.auth import UserRegister, UserLogin


def registration(**overrides):
    data = {
        "name": "Ada",
        "lastname": "Lovelace",
        "email": "Ada@Example.com",
        "password": "secret123",
        "c_password": "secret123",
    }
    data.update(overrides)
    return data


class TestUserRegister:

    def test_valid_registration(self):
        user = UserRegister(**registration())

        assert user.email == "ada@example.com"
        assert user.admin_key is None

    def test_names_are_stripped(self):
        user = UserRegister(**registration(name="  Ada  "))

        assert user.name == "Ada"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            UserRegister(**registration(lastname="   "))

    def test_password_mismatch(self):
        with pytest.raises(ValidationError) as exc_info:
            UserRegister(**registration(c_password="different"))

        assert "Passwords do not match" in str(exc_info.value)

    def test_short_password(self):
        with pytest.raises(ValidationError):
            UserRegister(**registration(password="abc", c_password="abc"))

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            UserRegister(**registration(email="not-an-email"))


class TestUserLogin:

    def test_email_lowercased(self):
        assert UserLogin(email="USER@EXAMPLE.COM", password="x").email == "user@example.com"

    def test_empty_password(self):
        with pytest.raises(ValidationError):
            UserLogin(email="user@example.com", password="")
