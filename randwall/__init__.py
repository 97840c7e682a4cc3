"""
randwall - pick a random desktop wallpaper from your own folders.

Selection is weighted towards images that have not been shown for a long time, recently shown
images are skipped, and individual images can be shown more or less often.
"""

__version__ = "1.0.0"
