from inline_snapshot import snapshot

from kv_store_registry.errors import (
    AdapterConstructionError,
    AdapterInstallError,
    AdapterLoadError,
    InvalidOptionsError,
    InvalidURIError,
    KVStoreRegistryError,
    PassthroughConstructionError,
    StoreConstructionError,
    UnknownProtocolError,
)


def test_message_only():
    error = KVStoreRegistryError(message="Something failed")

    assert str(error) == snapshot("Something failed")
    assert error.extra_info == {}


def test_extra_info_only():
    assert str(KVStoreRegistryError(extra_info={"key": "value", "count": 2})) == snapshot("key: value;count: 2")


def test_message_and_extra_info():
    error = KVStoreRegistryError(message="Something failed", extra_info={"key": "value"})

    assert str(error) == snapshot("Something failed: (key: value)")
    assert error.message == "Something failed"


def test_hierarchy():
    for error in (
        InvalidURIError(uri="nope"),
        UnknownProtocolError(scheme="nope:"),
        InvalidOptionsError(errors="bad ttl"),
        AdapterLoadError(package="pkg"),
        AdapterInstallError(requirement="pkg"),
        AdapterConstructionError(scheme="nope:"),
        PassthroughConstructionError(store_type="object"),
    ):
        assert isinstance(error, KVStoreRegistryError)

    assert issubclass(AdapterConstructionError, StoreConstructionError)
    assert issubclass(PassthroughConstructionError, StoreConstructionError)


def test_messages_name_the_offender():
    assert str(UnknownProtocolError(scheme="nope:")) == snapshot("Unknown protocol: nope:. Use register_adapter() to add support.")
    assert str(AdapterLoadError(package="pkg", export_name="Store", reason="missing")) == snapshot(
        "Failed to load adapter pkg: (package: pkg;export_name: Store;reason: missing)"
    )
    assert str(AdapterInstallError(requirement="pkg[extra]", returncode=1)) == snapshot(
        "Failed to install pkg[extra]: (requirement: pkg[extra];returncode: 1;stderr: None)"
    )
    assert str(AdapterConstructionError(scheme="memory:")) == snapshot(
        "Failed to construct store for memory:: (scheme: memory:;package: builtin;reason: None)"
    )
