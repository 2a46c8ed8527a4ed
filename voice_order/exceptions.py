"""
Exceptions raised by the voice order engine.

Matching and safety checks never raise: a transcript that cannot be resolved
or an item that is unsafe is reported through the outcome types in
`voice_order.matching` and `voice_order.ordering`. Exceptions are reserved for
the enrichment boundary, where a model call can fail.
"""


class VoiceOrderError(Exception):
    """Base class for all engine errors."""


class EnrichmentNotConfigured(VoiceOrderError):
    """The generative backend cannot be used (e.g. missing API key)."""


class EnrichmentBatchFailure(VoiceOrderError):
    """A single enrichment batch failed or returned unusable data.

    Caught per batch by the enrichment service; never aborts other batches.
    """

    def __init__(self, message: str, item_names: list[str] | None = None):
        super().__init__(message)
        self.item_names = item_names or []
