"""Shared helpers for building nodes data in tests."""


def node(*addresses):
    return {
        "status": {
            "addresses": [{"type": t, "address": a} for t, a in addresses]
        }
    }
