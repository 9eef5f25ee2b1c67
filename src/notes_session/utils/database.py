import uuid


def generate_uid() -> str:
    """Return a random 32-character hex id, unique without relying on clock resolution."""
    return uuid.uuid4().hex
