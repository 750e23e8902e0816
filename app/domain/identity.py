"""
Identity derivation for user records.
"""


def derive_user_key(handle: str) -> str:
    """
    Return the storage key for a client-supplied handle.

    The handle is used verbatim: no case folding and no trimming, so
    ``"Alice"`` and ``"alice"`` address different records.
    """
    return handle
