"""
Module: extractor.detection

Purpose:
    Detection subpackage for fillable regions in template text.

Key Modules:
    - patterns: Regex fragments (labels, blanks, date masks, checkboxes)
    - recognizers: One recognizer per field category, in priority order

Used By:
    - extractor.pipeline: Runs recognizers with interval exclusion
"""
