"""Role constants for the admin gate."""

ADMIN = "admin"
STAFF = "staff"
