"""Error classes for URI resolution and adapter loading.

Exception Hierarchy:
    KVStoreRegistryError (base for all registry errors)
    ├── InvalidURIError
    ├── UnknownProtocolError
    ├── InvalidOptionsError
    ├── AdapterLoadError
    ├── AdapterInstallError
    └── StoreConstructionError
        ├── AdapterConstructionError
        └── PassthroughConstructionError
"""

ExtraInfoType = dict[str, str | int | float | bool | None]


class KVStoreRegistryError(Exception):
    """Base exception for all KV Store Registry errors."""

    def __init__(self, message: str | None = None, extra_info: ExtraInfoType | None = None):
        message_parts: list[str] = []

        if message:
            message_parts.append(message)

        if extra_info:
            extra_info_str = ";".join(f"{k}: {v}" for k, v in extra_info.items())
            if message:
                extra_info_str = "(" + extra_info_str + ")"

            message_parts.append(extra_info_str)

        self.message: str | None = message
        self.extra_info: ExtraInfoType = extra_info or {}

        super().__init__(": ".join(message_parts))


class InvalidURIError(KVStoreRegistryError):
    """Raised when a connection string cannot be parsed as an absolute URI."""

    def __init__(self, uri: str):
        self.uri: str = uri

        super().__init__(message=f"Invalid URI: {uri}")


class UnknownProtocolError(KVStoreRegistryError):
    """Raised when no adapter is registered for a URI scheme."""

    def __init__(self, scheme: str):
        self.scheme: str = scheme

        super().__init__(message=f"Unknown protocol: {scheme}. Use register_adapter() to add support.")


class InvalidOptionsError(KVStoreRegistryError):
    """Raised when caller supplied store options fail validation."""

    def __init__(self, errors: str):
        super().__init__(message="Invalid store options", extra_info={"errors": errors})


class AdapterLoadError(KVStoreRegistryError):
    """Raised when an adapter could not be imported, even after installing it."""

    def __init__(self, package: str, export_name: str | None = None, reason: str | None = None):
        self.package: str = package
        self.export_name: str | None = export_name

        super().__init__(
            message=f"Failed to load adapter {package}",
            extra_info={"package": package, "export_name": export_name or "default", "reason": reason},
        )


class AdapterInstallError(KVStoreRegistryError):
    """Raised when installing an adapter distribution fails."""

    def __init__(self, requirement: str, returncode: int | None = None, stderr: str | None = None):
        self.requirement: str = requirement
        self.returncode: int | None = returncode

        super().__init__(
            message=f"Failed to install {requirement}",
            extra_info={"requirement": requirement, "returncode": returncode, "stderr": stderr},
        )


class StoreConstructionError(KVStoreRegistryError):
    """Base exception for failures while building an adapter or store client."""


class AdapterConstructionError(StoreConstructionError):
    """Raised when an adapter or the store client wrapping it cannot be constructed."""

    def __init__(self, scheme: str, package: str | None = None, reason: str | None = None):
        self.scheme: str = scheme
        self.package: str | None = package

        super().__init__(
            message=f"Failed to construct store for {scheme}",
            extra_info={"scheme": scheme, "package": package or "builtin", "reason": reason},
        )


class PassthroughConstructionError(StoreConstructionError):
    """Raised when the store client cannot wrap a caller supplied store."""

    def __init__(self, store_type: str, reason: str | None = None):
        super().__init__(
            message="Failed to construct store from the provided store instance",
            extra_info={"store_type": store_type, "reason": reason},
        )
