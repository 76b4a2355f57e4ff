"""
utils package
-------------

Contains utility modules used throughout the validation application.

Includes helpers for loading constants, reading uploaded files, parsing cell values, header normalization, and logging.
"""
