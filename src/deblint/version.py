__version__ = "1.0.0"

# Disregard snapshot versions (gbp dch -S) as "release builds"
IS_RELEASE_BUILD = ".gbp" not in __version__
