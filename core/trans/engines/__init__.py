"""Upstream translation engine implementations.

Importing this package registers every engine with TransInterface.registered.

Modules:
- GoogleTranslation: free ``translate_a/single`` endpoint, nested-array responses, one text per call.
- GoogleCloudTranslation: Cloud Translation v2 API, structured JSON responses, batch capable.
"""

from core.trans.engines.trans_google import GoogleTranslation
from core.trans.engines.trans_google_cloud import GoogleCloudTranslation

__all__: list[str] = [
    "GoogleCloudTranslation",
    "GoogleTranslation",
]
