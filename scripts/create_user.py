#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from credlocal.auth.users import DEFAULT_USERS_PATH, UserTable


def main() -> None:
    table = UserTable(DEFAULT_USERS_PATH)

    username = input("Username: ").strip()
    active_in = input("Active? [Y/n]: ").strip().lower()
    active = (active_in != "n")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        table.put_user(username, pw1, active=active)
    except ValueError as e:
        raise SystemExit(str(e))
    print(f"OK -> {table.path}")


if __name__ == "__main__":
    main()
