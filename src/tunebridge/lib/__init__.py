"""Domain-specific library modules.

Modules here import tunebridge domain models and provide higher-level logic
(matching, history deduplication). Pure utilities that don't depend on
domain models live in ``tunebridge.utils`` instead.

Consumers should import directly from submodules::

    from tunebridge.lib.matching import rank_candidates
    from tunebridge.lib.history import select_related
"""
