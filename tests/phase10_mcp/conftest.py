"""Shared test infrastructure for phase10_mcp tests.

Provides fixtures for resetting server state around a sample corpus and
for decoding TOON responses returned by _impl functions.
"""

import pytest

from codequery.utils.toon_encoder import ToonEncoder

_toon = ToonEncoder()


def _as_dict(result):
    """Decode TOON-encoded responses back to dict for assertions.

    _impl functions go through _with_error_handling which may TOON-encode
    eligible success responses. Tests need dict access for assertions.
    """
    if isinstance(result, str):
        return _toon.decode(result)
    return result


@pytest.fixture()
def reset_server_state():
    """Reset the shared registry and settings, restoring both afterwards."""
    import codequery.mcp_server._shared as shared_module

    orig_settings = shared_module._settings
    shared_module._registry.reset()

    yield shared_module

    shared_module._registry.reset()
    shared_module.configure_server(orig_settings)


@pytest.fixture()
def active_sample_corpus(reset_server_state, sample_corpus):
    """Activate the in-memory sample corpus for _impl calls."""
    reset_server_state._registry.activate_corpus(sample_corpus)
    return sample_corpus
