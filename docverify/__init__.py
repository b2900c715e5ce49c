"""
DocVerify - AI document extraction and cross-validation against reference data.

Example:
    >>> from docverify.domains.orchestration import PipelineFacade
    >>> pipeline = PipelineFacade(extractor, validator)
    >>> result = await pipeline.run(document, reference_json, "invoice", [])
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
