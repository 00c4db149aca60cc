"""Google OAuth flow and cookie-based session helpers."""
