# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification for the demo user table (argon2)
- User table loading from data/users.yml
- Signed session-id cookies (itsdangerous)
"""
