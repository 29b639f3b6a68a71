#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from weightlog.auth.passwords import hash_password
from weightlog.auth.users import CredentialStore
from weightlog.config import load_settings


def main() -> None:
    users_path = load_settings().users_path

    username = input("Username: ").strip()
    if not username:
        raise SystemExit("Empty username")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not pw1:
        raise SystemExit("Empty password")

    CredentialStore(users_path).add(username, hash_password(pw1))
    print(f"OK -> {users_path}")


if __name__ == "__main__":
    main()
