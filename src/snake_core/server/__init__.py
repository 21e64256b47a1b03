"""HTTP and WebSocket adapter hosting snake-core sessions."""
