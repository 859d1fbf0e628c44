"""Strongly typed identifiers for directory entities.

Directory ids are opaque strings of the form "<provider>|<provider user id>",
e.g. "google-oauth2|1029384756" or "ad|Mozilla-LDAP|jdoe".
"""

from typing import NewType

DirectoryUserId = NewType("DirectoryUserId", str)
