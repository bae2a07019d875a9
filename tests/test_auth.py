"""
Dashboard authentication tests
"""

import auth


def test_hash_and_verify():
    hashed = auth.hash_password("s3cret!")
    assert auth.verify_password("s3cret!", hashed)
    assert not auth.verify_password("wrong", hashed)


def test_default_user_and_forced_change(tmp_path):
    path = tmp_path / "users.dat"
    auth.ensure_default_user(path)
    user = auth.login(path, auth.DEFAULT_USERNAME, auth.DEFAULT_PASSWORD)
    assert user is not None
    assert user.role == auth.Role.ADMIN
    assert auth.is_force_password_change(path, auth.DEFAULT_USERNAME)

    assert auth.change_password(path, auth.DEFAULT_USERNAME, "newpass1")
    assert not auth.is_force_password_change(path, auth.DEFAULT_USERNAME)
    assert auth.login(path, auth.DEFAULT_USERNAME, auth.DEFAULT_PASSWORD) is None
    assert auth.login(path, auth.DEFAULT_USERNAME, "newpass1") is not None


def test_ensure_default_user_keeps_existing(tmp_path):
    path = tmp_path / "users.dat"
    auth.ensure_default_user(path)
    auth.change_password(path, auth.DEFAULT_USERNAME, "newpass1")
    auth.ensure_default_user(path)
    assert auth.login(path, auth.DEFAULT_USERNAME, "newpass1") is not None


def test_change_password_rules(tmp_path):
    path = tmp_path / "users.dat"
    auth.ensure_default_user(path)
    assert not auth.change_password(path, auth.DEFAULT_USERNAME, "short")
    assert not auth.change_password(path, "nobody", "longenough")
