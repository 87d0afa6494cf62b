"""In-memory implementation of AvatarStorage for testing."""


class FakeAvatarStorage:
    def __init__(self):
        self.files: dict[str, bytes] = {}
        self._counter = 0

    def save(self, user_id: str, filename: str, data: bytes) -> str:
        self._counter += 1
        ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        name = f"{user_id}_{self._counter}.{ext}" if ext else f"{user_id}_{self._counter}"
        self.files[name] = data
        return f"/uploads/{name}"
