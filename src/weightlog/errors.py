# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the auth, storage and service layers.

Every class carries the HTTP status it maps to and the generic message the
client sees. The real cause stays in the exception chain and in the logs.
"""

from __future__ import annotations


class TrackerError(Exception):
    status_code = 500
    public_message = "Internal server error"


class MissingCredentials(TrackerError):
    status_code = 400
    public_message = "Missing credentials"


class WrongCredentials(TrackerError):
    status_code = 401
    public_message = "Not authenticated"


class InvalidToken(TrackerError):
    status_code = 401
    public_message = "Not authenticated"


class NotFound(TrackerError):
    status_code = 404
    public_message = "Not found"


class DatabaseError(TrackerError):
    pass


class WorkerError(TrackerError):
    pass
