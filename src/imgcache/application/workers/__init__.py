"""Worker pools for offloaded pipeline work."""

from imgcache.application.workers.processing_pool import ProcessingPool

__all__ = ["ProcessingPool"]
