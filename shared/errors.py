"""Exception types raised by the library core."""


class SoundgridError(Exception):
    """Base class for library errors."""


class SongNotFoundError(SoundgridError, KeyError):
    """Song id is unknown, or not visible to the current viewer."""

    def __init__(self, song_id: str):
        super().__init__(song_id)
        self.song_id = song_id

    def __str__(self) -> str:
        return f"Song not found: {self.song_id}"


class SongQueryError(SoundgridError):
    """The song repository could not be queried."""


class MediaResolutionError(SoundgridError):
    """A storage key could not be turned into a fetchable URL."""

    def __init__(self, storage_key, reason: str = ""):
        message = f"Could not resolve media URL for {storage_key!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.storage_key = storage_key


class ViewerRequiredError(SoundgridError):
    """No authenticated viewer is attached to the request."""
