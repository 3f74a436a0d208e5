"""Resolution of a connection URI into a KeyValueStore."""

import inspect
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import SplitResult

from kv_store_registry.client import KeyValueStore
from kv_store_registry.context import StoreContext, default_context
from kv_store_registry.errors import AdapterConstructionError, PassthroughConstructionError, UnknownProtocolError
from kv_store_registry.options import StoreOptions, merge_options, parse_query_options, parse_uri
from kv_store_registry.registry import normalize_scheme
from kv_store_registry.types import AdapterDescriptor

logger = logging.getLogger(__name__)

STORE_OPTION = "store"


def accepted_options(constructor: Any, options: dict[str, Any], *, positional: int = 0) -> dict[str, Any]:
    """Drop the options a constructor has no keyword parameter for.

    Constructors taking `**kwargs`, and constructors whose signature cannot be inspected, receive every option.
    """
    try:
        signature = inspect.signature(constructor)
    except (TypeError, ValueError):
        return options

    parameters = list(signature.parameters.values())

    if any(parameter.kind is inspect.Parameter.VAR_KEYWORD for parameter in parameters):
        return options

    names: set[str] = {
        parameter.name
        for parameter in parameters[positional:]
        if parameter.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    }

    if dropped := sorted(set(options) - names):
        logger.debug("Dropping options the adapter does not accept", extra={"adapter": repr(constructor), "dropped": dropped})

    return {name: value for name, value in options.items() if name in names}


def instantiate_adapter(descriptor: AdapterDescriptor, constructor: Any, uri: str, options: dict[str, Any]) -> Any:
    if descriptor.mode == "string":
        return constructor(uri, **accepted_options(constructor, options, positional=1))

    return constructor(**accepted_options(constructor, options))


async def resolve_store(
    uri: str,
    options: "Mapping[str, Any] | StoreOptions | None" = None,
    *,
    context: StoreContext | None = None,
) -> KeyValueStore:
    """Resolve a connection URI into a ready-to-use KeyValueStore.

    Caller options always win over options derived from the URI or from the scheme's options mapper, and mapper
    options win over query string options.

    Args:
        uri: The connection URI, e.g. `redis://localhost:6379/0` or `memory://?namespace=app`.
        options: Store options. `store` bypasses URI resolution, `namespace` and `ttl` (milliseconds) configure
            the client, anything else is forwarded to the client and the adapter.
        context: The registry and loader to use. Defaults to the process-wide context.

    Raises:
        InvalidOptionsError: If the options fail validation.
        InvalidURIError: If the URI has no usable scheme.
        UnknownProtocolError: If no adapter is registered for the scheme.
        AdapterLoadError: If the adapter cannot be imported or installed.
        AdapterConstructionError: If the adapter or the client cannot be constructed.
        PassthroughConstructionError: If the client cannot wrap a caller supplied store.
    """
    context = context or default_context()

    store_options: StoreOptions = StoreOptions.coerce(options)
    caller_options: dict[str, Any] = store_options.to_mapping()

    if store_options.store is not None:
        try:
            return KeyValueStore(**caller_options)
        except Exception as e:
            raise PassthroughConstructionError(store_type=type(store_options.store).__name__, reason=str(e)) from e

    url: SplitResult = parse_uri(uri)
    scheme: str = normalize_scheme(url.scheme)

    descriptor: AdapterDescriptor | None = context.registry.lookup(scheme)

    if descriptor is None:
        raise UnknownProtocolError(scheme=scheme)

    logger.debug("Resolving store", extra={"scheme": scheme, "package": descriptor.package})

    if descriptor.package is None:
        try:
            return KeyValueStore.from_options(StoreOptions.model_validate(merge_options(parse_query_options(url), caller_options)))
        except Exception as e:
            raise AdapterConstructionError(scheme=scheme, reason=str(e)) from e

    constructor: Any = await context.loader.load(descriptor.package, descriptor.export_name, requirement=descriptor.install_requirement)

    try:
        adapter_options: dict[str, Any] = merge_options(parse_query_options(url), descriptor.map_options(url), caller_options)
        _ = adapter_options.pop(STORE_OPTION, None)

        adapter: Any = instantiate_adapter(descriptor=descriptor, constructor=constructor, uri=uri, options=adapter_options)

        client_options: dict[str, Any] = {name: value for name, value in caller_options.items() if name != STORE_OPTION}

        return KeyValueStore(store=adapter, **client_options)
    except Exception as e:
        raise AdapterConstructionError(scheme=scheme, package=descriptor.package, reason=str(e)) from e
