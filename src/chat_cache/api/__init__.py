"""HTTP facade over the chat service."""
