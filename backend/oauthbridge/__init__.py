"""oauthbridge: OAuth 1.0a three-legged sign-in as a service."""
