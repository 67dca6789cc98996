def derive_name(value: str) -> str:
    """Return the join key for a URL or path.

    Takes the part after the last ``/`` then drops any query string, so
    ``https://host/path/file.bin?token=abc`` -> ``file.bin``.
    """
    tail = value.rsplit("/", 1)[-1]
    return tail.split("?", 1)[0]
