"""OAuth1 handshake domain."""
