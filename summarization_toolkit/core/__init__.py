"""Core text processing for the toolkit's tools.

WHY: The splitter, SRT converter, and merger are pure text transforms.
Keeping them free of HTTP and argument parsing makes them easy to test
and reuse from the pipeline driver.

HOW: models.py defines the splitter's dataclasses, splitter.py plans and
writes prompt parts, subtitles.py converts .srt files, merger.py joins
summary JSON maps.

RULES:
- No network access in this package
- Planning functions return data; only the write_*/convert_*/merge_file
  helpers touch the filesystem
"""
