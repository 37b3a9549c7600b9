from .link_enricher import LinkEnricher

__all__ = ["LinkEnricher"]
