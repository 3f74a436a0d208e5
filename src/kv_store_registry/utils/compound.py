DEFAULT_COMPOUND_SEPARATOR = "::"


def compound_string(first: str, second: str, separator: str | None = None) -> str:
    separator = separator or DEFAULT_COMPOUND_SEPARATOR
    return f"{first}{separator}{second}"


def uncompound_string(string: str, separator: str | None = None) -> tuple[str, str]:
    separator = separator or DEFAULT_COMPOUND_SEPARATOR
    if separator not in string:
        msg: str = f"String {string} is not a compound identifier"
        raise TypeError(msg) from None

    first, second = string.split(sep=separator, maxsplit=1)

    return first, second


def compound_key(collection: str, key: str, separator: str | None = None) -> str:
    return compound_string(first=collection, second=key, separator=separator)


def uncompound_key(key: str, separator: str | None = None) -> tuple[str, str]:
    return uncompound_string(string=key, separator=separator)


def get_keys_from_compound_keys(compound_keys: list[str], collection: str, separator: str | None = None) -> list[str]:
    """Return the keys of `compound_keys` that belong to `collection`, ignoring keys that are not compound."""
    prefix: str = compound_string(first=collection, second="", separator=separator)

    return [compound[len(prefix) :] for compound in compound_keys if compound.startswith(prefix)]


def get_collections_from_compound_keys(compound_keys: list[str], separator: str | None = None) -> list[str]:
    """Return the distinct collections of `compound_keys`, ignoring keys that are not compound."""
    separator = separator or DEFAULT_COMPOUND_SEPARATOR

    return sorted({uncompound_key(key=compound, separator=separator)[0] for compound in compound_keys if separator in compound})
