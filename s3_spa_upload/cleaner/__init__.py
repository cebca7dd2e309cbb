"""
Stale object cleaner module.

Lists the bucket and deletes objects under the deploy prefix that the current
upload pass did not write.
"""

from .cleaner import (
    delete_object,
    list_object_keys,
    remove_stale_objects,
    select_stale_keys,
)

__all__ = [
    "delete_object",
    "list_object_keys",
    "remove_stale_objects",
    "select_stale_keys",
]
