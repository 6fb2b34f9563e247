import pytest

from credlocal.auth.passwords import check_password, hash_password
from credlocal.auth.users import UserTable


def test_authenticate_known_user(users_path):
    table = UserTable(users_path)
    u = table.authenticate("Mary", "qwerasdf")
    assert u is not None
    assert u.username == "Mary"
    assert u.password_hash != "qwerasdf"


def test_authenticate_rejects_bad_input(users_path):
    table = UserTable(users_path)
    assert table.authenticate("Mary", "wrong") is None
    assert table.authenticate("Maria", "qwerasdf") is None
    assert table.authenticate("", "") is None


def test_inactive_user_cannot_log_in(users_path):
    table = UserTable(users_path)
    table.put_user("John", "12345", active=False)
    assert table.get_user("John").active is False
    assert table.authenticate("John", "12345") is None


def test_missing_file_is_empty(tmp_path):
    table = UserTable(tmp_path / "nope.yml")
    assert table.users() == {}
    assert table.get_user("John") is None


def test_put_user_requires_name(tmp_path):
    with pytest.raises(ValueError):
        UserTable(tmp_path / "users.yml").put_user("  ", "pw")


def test_password_helpers():
    with pytest.raises(ValueError):
        hash_password("")
    assert check_password(hash_password("pw"), "pw")
    assert not check_password("not-a-hash", "pw")
    assert not check_password("", "pw")
